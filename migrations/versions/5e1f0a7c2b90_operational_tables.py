"""operational_tables

Create users and the six operational compliance tables, each with the
`is_sample` flag the installer uses to tell demo rows apart.

Revision ID: 5e1f0a7c2b90
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = "5e1f0a7c2b90"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns(updated=True):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=True)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True))
    return cols


def _owner_columns():
    return [
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("is_sample", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("email", sa.String(length=255), nullable=True, unique=True),
            sa.Column("first_name", sa.String(length=120), nullable=True),
            sa.Column("last_name", sa.String(length=120), nullable=True),
            sa.Column("profile_image_url", sa.String(length=500), nullable=True),
            sa.Column("role", sa.String(length=20), nullable=False, server_default="viewer"),
            sa.Column("is_sample", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_audit_columns(),
        )

    if "data_types" not in existing_tables:
        op.create_table(
            "data_types",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category", sa.Text(), nullable=False),
            sa.Column("purpose", sa.Text(), nullable=False),
            sa.Column("source", sa.Text(), nullable=False),
            sa.Column("retention", sa.Text(), nullable=True),
            sa.Column("legal_basis", sa.Text(), nullable=True),
            *_owner_columns(),
            *_audit_columns(),
        )
        op.create_index("ix_data_types_user_id", "data_types", ["user_id"])

    if "consent_records" not in existing_tables:
        op.create_table(
            "consent_records",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("subject_email", sa.Text(), nullable=False),
            sa.Column("subject_name", sa.Text(), nullable=True),
            sa.Column("consent_type", sa.Text(), nullable=False),
            sa.Column("status", sa.Text(), nullable=False),
            sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
            sa.Column("policy_version", sa.Text(), nullable=True),
            sa.Column("ip_address", sa.Text(), nullable=True),
            sa.Column("user_agent", sa.Text(), nullable=True),
            sa.Column("method", sa.Text(), nullable=False),
            *_owner_columns(),
            *_audit_columns(updated=False),
        )
        op.create_index("ix_consent_records_subject_email", "consent_records", ["subject_email"])
        op.create_index("ix_consent_records_user_id", "consent_records", ["user_id"])

    if "dsar_requests" not in existing_tables:
        op.create_table(
            "dsar_requests",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("subject_email", sa.Text(), nullable=False),
            sa.Column("subject_name", sa.Text(), nullable=True),
            sa.Column("request_type", sa.Text(), nullable=False),
            sa.Column("status", sa.String(length=30), nullable=True, server_default="submitted"),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("assigned_to", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            *_owner_columns(),
            *_audit_columns(),
        )
        op.create_index("ix_dsar_requests_subject_email", "dsar_requests", ["subject_email"])
        op.create_index("ix_dsar_requests_user_id", "dsar_requests", ["user_id"])

    if "privacy_notices" not in existing_tables:
        op.create_table(
            "privacy_notices",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("title", sa.Text(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("version", sa.Text(), nullable=False),
            sa.Column("regulation", sa.Text(), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.false()),
            sa.Column("effective_date", sa.DateTime(timezone=True), nullable=True),
            *_owner_columns(),
            *_audit_columns(),
        )
        op.create_index("ix_privacy_notices_user_id", "privacy_notices", ["user_id"])

    if "incidents" not in existing_tables:
        op.create_table(
            "incidents",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("title", sa.Text(), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("severity", sa.String(length=20), nullable=False),
            sa.Column("status", sa.String(length=30), nullable=False, server_default="open"),
            sa.Column("affected_records", sa.Integer(), nullable=True),
            sa.Column("discovered_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("reported_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("notification_required", sa.Boolean(), nullable=True, server_default=sa.false()),
            sa.Column("notification_sent", sa.Boolean(), nullable=True, server_default=sa.false()),
            sa.Column("steps", sa.Text(), nullable=True),
            sa.Column("assigned_to", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
            *_owner_columns(),
            *_audit_columns(),
        )
        op.create_index("ix_incidents_user_id", "incidents", ["user_id"])

    if "domains" not in existing_tables:
        op.create_table(
            "domains",
            sa.Column("id", sa.String(length=36), primary_key=True),
            sa.Column("name", sa.Text(), nullable=False, unique=True),
            sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
            *_owner_columns(),
            *_audit_columns(),
        )
        op.create_index("ix_domains_user_id", "domains", ["user_id"])


def downgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    for table in ("domains", "incidents", "privacy_notices", "dsar_requests",
                  "consent_records", "data_types", "users"):
        if table in existing_tables:
            op.drop_table(table)
