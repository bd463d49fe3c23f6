"""
Flask CLI commands for the installer.

Usage:
    flask install [--sample-data] [--admin-email … --admin-first-name … --admin-last-name …]
    flask install-status
    flask remove-sample-data
    flask reset-install --yes
"""

import logging

import click

from privacy_guard.core.exceptions import AlreadyInstalledError, ValidationError
from privacy_guard.services import install_service as svc

logger = logging.getLogger(__name__)


def register_cli(app):
    """Attach the installer commands to ``app.cli``."""

    @app.cli.command("install")
    @click.option("--sample-data", is_flag=True, help="Also generate demo records.")
    @click.option("--admin-email", default=None, help="Owner account for the sample data.")
    @click.option("--admin-first-name", default=None)
    @click.option("--admin-last-name", default=None)
    def install_cmd(sample_data, admin_email, admin_first_name, admin_last_name):
        """Create lookup tables, seed catalogs and mark the app installed."""
        admin_fields = (admin_email, admin_first_name, admin_last_name)
        raw_admin = None
        if any(admin_fields):
            raw_admin = {
                "email": admin_email,
                "first_name": admin_first_name,
                "last_name": admin_last_name,
            }
        try:
            admin_user = svc.normalize_admin_user(raw_admin)
            svc.require_not_installed()
        except (ValidationError, AlreadyInstalledError) as exc:
            raise click.ClickException(str(exc)) from exc

        result = svc.perform_installation(include_sample_data=sample_data, admin_user=admin_user)
        details = result["details"]
        click.echo(result["message"])
        click.echo(f"  steps: {', '.join(details['steps'])}")
        for group, counts in details["counts"].items():
            click.echo(f"  {group}: {sum(counts.values())} rows inserted")
        click.echo(f"  installed at: {details['installation_date']}")

    @app.cli.command("install-status")
    def install_status_cmd():
        """Show what the installer has done so far."""
        status = svc.check_installation_status()
        width = max(len(k) for k in status)
        for key, value in status.items():
            click.echo(f"{key:<{width}}  {value}")

    @app.cli.command("remove-sample-data")
    def remove_sample_data_cmd():
        """Delete demo records and orphaned sample owners."""
        result = svc.remove_sample_data()
        if not result["success"]:
            raise click.ClickException(result["message"])
        click.echo(result["message"])

    @app.cli.command("reset-install")
    @click.confirmation_option(
        prompt="This drops all lookup and default-config tables. Continue?",
    )
    def reset_install_cmd():
        """Clear the installation flag and drop lookup/config tables."""
        result = svc.reset_installation()
        if not result["success"]:
            raise click.ClickException(result["message"])
        logger.warning("Installation reset from CLI")
        click.echo(result["message"])
