"""
Install service tests.

Covers:
    - Status checker (fresh, installed, degraded on query failure)
    - Reference / default-config seeding (contents, idempotence, no overwrite)
    - perform_installation (details, atomicity, flag upsert, re-run)
    - reset_installation + reinstall
    - Reference lookup and admin identity validation
"""

import json
import logging

import pytest

from privacy_guard.core.exceptions import (
    AlreadyInstalledError,
    UnsupportedDialectError,
    ValidationError,
)
from privacy_guard.middleware.logging_config import JSONFormatter
from privacy_guard.models import db
from privacy_guard.models.installation import (
    INSTALLATION_FLAG_KEY,
    ConsentStatusRef,
    DataCategoryRef,
    DefaultAlertSetting,
    DefaultRetentionPolicy,
    DsarStatusRef,
    IncidentStatusRef,
    InstallationSetting,
    RegulationRef,
)
from privacy_guard.models.inventory import ConsentRecord, DataType, Domain, DsarRequest
from privacy_guard.models.user import User
from privacy_guard.services import install_service as svc
from privacy_guard.services import reference_catalogs as catalogs
from privacy_guard.services import sample_data
from privacy_guard.services.helpers import upsert


def _count(model):
    return db.session.execute(db.select(db.func.count()).select_from(model)).scalar()


# ═══════════════════════════════════════════════════════════════
# Status checker
# ═══════════════════════════════════════════════════════════════


class TestInstallationStatus:

    def test_fresh_database_reports_nothing_installed(self):
        status = svc.check_installation_status()
        assert status == {
            "is_installed": False,
            "has_reference_data": False,
            "has_default_configurations": False,
            "sample_data_exists": False,
            "installation_date": None,
        }

    def test_all_flags_true_after_install_with_sample_data(self, installed):
        status = svc.check_installation_status()
        assert status["is_installed"] is True
        assert status["has_reference_data"] is True
        assert status["has_default_configurations"] is True
        assert status["sample_data_exists"] is True
        assert status["installation_date"]

    def test_install_without_sample_data(self):
        svc.perform_installation(include_sample_data=False)
        status = svc.check_installation_status()
        assert status["is_installed"] is True
        assert status["has_reference_data"] is True
        assert status["sample_data_exists"] is False

    def test_query_failure_degrades_to_negative_status(self, installed, monkeypatch):
        def boom(model):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(svc, "_has_rows", boom)
        status = svc.check_installation_status()
        assert status["is_installed"] is False
        assert status["has_reference_data"] is False
        assert status["installation_date"] is None

    def test_reference_data_requires_every_table(self):
        svc.seed_reference_data()
        db.session.execute(db.delete(IncidentStatusRef.__table__))
        db.session.commit()
        assert svc.check_installation_status()["has_reference_data"] is False

    def test_require_not_installed(self, installed):
        with pytest.raises(AlreadyInstalledError) as exc_info:
            svc.require_not_installed()
        assert exc_info.value.installation_date


# ═══════════════════════════════════════════════════════════════
# Seeders
# ═══════════════════════════════════════════════════════════════


class TestReferenceDataSeeder:

    def test_seeds_fixed_catalogs(self):
        counts = svc.seed_reference_data()
        assert counts == {
            "data_category_refs": 7,
            "consent_status_refs": 5,
            "dsar_status_refs": 5,
            "regulation_refs": 6,
            "incident_status_refs": 4,
        }
        assert _count(DataCategoryRef) == 7
        assert _count(RegulationRef) == 6

    def test_second_run_inserts_nothing(self):
        svc.seed_reference_data()
        again = svc.seed_reference_data()
        assert set(again.values()) == {0}
        assert _count(ConsentStatusRef) == 5
        assert _count(DsarStatusRef) == 5

    def test_existing_rows_are_not_overwritten(self):
        svc.seed_reference_data()
        gdpr = db.session.get(RegulationRef, "gdpr")
        gdpr.description = "Edited by the privacy officer"
        db.session.commit()

        svc.seed_reference_data()
        db.session.expire_all()
        assert db.session.get(RegulationRef, "gdpr").description == "Edited by the privacy officer"

    def test_catalog_values(self):
        svc.seed_reference_data()
        names = {r.name for r in db.session.execute(db.select(RegulationRef)).scalars()}
        assert names == {"GDPR", "CCPA", "UK_DPA", "PIPEDA", "LGPD", "CDPA"}
        cancelled = db.session.get(DsarStatusRef, "cancelled")
        assert cancelled.color == "gray"
        assert cancelled.sort_order == 5
        assert db.session.get(DataCategoryRef, "biometric").icon == "fingerprint"


class TestDefaultConfigurationSeeder:

    def test_seeds_alerts_and_retention_policies(self):
        counts = svc.setup_default_configurations()
        assert counts == {"default_alert_settings": 6, "default_retention_policies": 6}

        alert_ids = {a.id for a in db.session.execute(db.select(DefaultAlertSetting)).scalars()}
        assert alert_ids == {a["id"] for a in catalogs.DEFAULT_ALERT_SETTINGS}

        urgent = db.session.get(DefaultAlertSetting, "ssl_expiry_1")
        assert urgent.notification_methods == ["email", "sms", "slack"]
        assert urgent.threshold_days == 1

        policy = db.session.get(DefaultRetentionPolicy, "financial_legal")
        assert policy.retention_period == "7 years"
        assert policy.legal_basis == "legal_obligation"

    def test_idempotent(self):
        svc.setup_default_configurations()
        assert svc.setup_default_configurations() == {
            "default_alert_settings": 0,
            "default_retention_policies": 0,
        }
        assert _count(DefaultRetentionPolicy) == 6


# ═══════════════════════════════════════════════════════════════
# perform_installation
# ═══════════════════════════════════════════════════════════════


class TestPerformInstallation:

    def test_result_details(self, installed):
        assert installed["success"] is True
        details = installed["details"]
        assert details["reference_data_seeded"] is True
        assert details["default_configurations_set"] is True
        assert details["sample_data_generated"] is True
        assert details["steps"] == [
            "ensure_tables",
            "seed_reference_data",
            "setup_default_configurations",
            "generate_sample_data",
            "mark_installed",
        ]
        assert details["counts"]["reference_data"]["data_category_refs"] == 7
        assert details["counts"]["sample_data"]["dsar_requests"] == 4
        assert details["installation_date"]

    def test_failure_rolls_back_every_step(self, monkeypatch):
        def broken_sample_data(**kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(svc, "generate_sample_data", broken_sample_data)
        with pytest.raises(RuntimeError, match="disk full"):
            svc.perform_installation(include_sample_data=True)

        assert db.session.get(InstallationSetting, INSTALLATION_FLAG_KEY) is None
        assert _count(DataCategoryRef) == 0
        assert _count(DefaultAlertSetting) == 0
        assert svc.check_installation_status()["is_installed"] is False

    def test_failure_log_names_the_step(self, monkeypatch, caplog):
        def broken_defaults():
            raise RuntimeError("catalog table locked")

        monkeypatch.setattr(svc, "setup_default_configurations", broken_defaults)
        with caplog.at_level(logging.ERROR, logger=svc.__name__):
            with pytest.raises(RuntimeError):
                svc.perform_installation()

        failure = [r for r in caplog.records if r.getMessage().startswith("Installation failed")]
        assert len(failure) == 1
        assert failure[0].install_step == "setup_default_configurations"

        line = json.loads(JSONFormatter().format(failure[0]))
        assert line["install_step"] == "setup_default_configurations"

    def test_failure_during_sample_generation_leaves_nothing(self, monkeypatch):
        real_insert = sample_data.dialect_insert

        def insert_failing_on_domains(model):
            if model is Domain:
                raise RuntimeError("domains table locked")
            return real_insert(model)

        monkeypatch.setattr(sample_data, "dialect_insert", insert_failing_on_domains)
        with pytest.raises(RuntimeError, match="domains table locked"):
            svc.perform_installation(include_sample_data=True)

        for model in (DataType, ConsentRecord, DsarRequest, User, DataCategoryRef,
                      InstallationSetting):
            assert _count(model) == 0, model.__tablename__

    def test_rerun_keeps_original_installation_date(self):
        first = svc.perform_installation()
        second = svc.perform_installation()
        assert second["details"]["installation_date"] == first["details"]["installation_date"]
        assert set(second["details"]["counts"]["reference_data"].values()) == {0}
        assert _count(InstallationSetting) == 1

    def test_flag_value(self):
        svc.perform_installation()
        flag = db.session.get(InstallationSetting, INSTALLATION_FLAG_KEY)
        assert flag.value == "true"

    def test_advisory_lock_is_postgres_only(self, app, monkeypatch):
        assert svc._acquire_install_lock() is False
        monkeypatch.setitem(app.config, "INSTALL_ADVISORY_LOCK", False)
        assert svc._acquire_install_lock() is False

    def test_unsupported_dialect(self, monkeypatch):
        monkeypatch.setattr(upsert, "dialect_name", lambda: "mysql")
        with pytest.raises(UnsupportedDialectError):
            svc.perform_installation()
        assert svc.check_installation_status()["is_installed"] is False


# ═══════════════════════════════════════════════════════════════
# Reset
# ═══════════════════════════════════════════════════════════════


class TestResetInstallation:

    def test_reset_then_status_does_not_raise(self, installed):
        result = svc.reset_installation()
        assert result["success"] is True

        status = svc.check_installation_status()
        assert status["is_installed"] is False
        assert status["has_reference_data"] is False
        assert status["has_default_configurations"] is False

    def test_reinstall_after_reset_recreates_tables(self, installed):
        svc.reset_installation()
        result = svc.perform_installation()
        assert result["details"]["counts"]["reference_data"]["incident_status_refs"] == 4
        assert svc.check_installation_status()["is_installed"] is True

    def test_reset_failure_is_reported(self, monkeypatch):
        def boom():
            raise RuntimeError("no connection")

        monkeypatch.setattr(svc, "dialect_name", boom)
        result = svc.reset_installation()
        assert result == {"success": False, "message": "Failed to reset installation"}


# ═══════════════════════════════════════════════════════════════
# Lookups & validation
# ═══════════════════════════════════════════════════════════════


class TestReferenceLookup:

    def test_rows_ordered_by_sort_order(self):
        svc.seed_reference_data()
        rows = svc.list_reference_data("categories")
        assert [r["name"] for r in rows][:2] == ["personal", "sensitive"]
        assert rows[-1]["name"] == "location"
        assert rows[0]["icon"] == "user"

    def test_regulation_extra_fields(self):
        svc.seed_reference_data()
        ccpa = next(r for r in svc.list_reference_data("regulations") if r["id"] == "ccpa")
        assert ccpa["full_name"] == "California Consumer Privacy Act"
        assert ccpa["jurisdiction"] == "California, US"

    def test_unknown_kind(self):
        with pytest.raises(ValidationError) as exc_info:
            svc.list_reference_data("currencies")
        assert exc_info.value.details["type"] == "currencies"


class TestAdminUserValidation:

    def test_absent_admin(self):
        assert svc.normalize_admin_user(None) is None

    def test_trims_fields(self):
        admin = svc.normalize_admin_user({
            "email": "  dpo@privacyguard.io ",
            "first_name": " Dana ",
            "last_name": "Ortiz",
        })
        assert admin == {"email": "dpo@privacyguard.io", "first_name": "Dana", "last_name": "Ortiz"}

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            svc.normalize_admin_user({"email": "dpo@privacyguard.io"})
        assert exc_info.value.details["missing"] == ["first_name", "last_name"]

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            svc.normalize_admin_user({"email": "not-an-email", "first_name": "A", "last_name": "B"})

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            svc.normalize_admin_user(["dpo@privacyguard.io"])
