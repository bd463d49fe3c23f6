"""
Installation tables — flag, reference lookups and default configurations.

These eight tables are owned by the installer: it creates them if absent,
seeds them, and ``reset_installation`` drops the seven lookup/config tables
again. Only the ``installation_settings`` table survives a reset (its rows
are deleted instead).

Reference rows are keyed by a stable slug (``id``) and have a unique
``name``; seeding is insert-if-absent on ``name`` so manual edits made
directly in a lookup table are never overwritten.
"""

from datetime import datetime, timezone

from privacy_guard.models import db

INSTALLATION_FLAG_KEY = "installation_complete"


def _utcnow():
    return datetime.now(timezone.utc)


class InstallationSetting(db.Model):
    """Key/value marker row. Presence of ``installation_complete`` means installed."""
    __tablename__ = "installation_settings"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self):
        return {
            "key": self.key,
            "value": self.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class ReferenceRow(db.Model):
    """Abstract base for the five lookup tables."""
    __abstract__ = True

    id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text)
    sort_order = db.Column(db.Integer, default=0)

    # Extra display columns a subclass adds on top of the base four.
    extra_fields = ()

    def to_dict(self):
        d = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sort_order": self.sort_order,
        }
        for field in self.extra_fields:
            d[field] = getattr(self, field)
        return d


class DataCategoryRef(ReferenceRow):
    __tablename__ = "data_category_refs"
    icon = db.Column(db.String(50))
    extra_fields = ("icon",)


class ConsentStatusRef(ReferenceRow):
    __tablename__ = "consent_status_refs"
    color = db.Column(db.String(30))
    extra_fields = ("color",)


class DsarStatusRef(ReferenceRow):
    __tablename__ = "dsar_status_refs"
    color = db.Column(db.String(30))
    extra_fields = ("color",)


class RegulationRef(ReferenceRow):
    __tablename__ = "regulation_refs"
    full_name = db.Column(db.Text)
    jurisdiction = db.Column(db.String(100))
    extra_fields = ("full_name", "jurisdiction")


class IncidentStatusRef(ReferenceRow):
    __tablename__ = "incident_status_refs"
    color = db.Column(db.String(30))
    extra_fields = ("color",)


class DefaultAlertSetting(db.Model):
    """Default alert threshold; several rows may share one ``alert_type``."""
    __tablename__ = "default_alert_settings"

    id = db.Column(db.String(50), primary_key=True)
    alert_type = db.Column(db.String(50), nullable=False)  # ssl_expiry, dsar_overdue, consent_expiry
    threshold_days = db.Column(db.Integer)
    is_enabled = db.Column(db.Boolean, default=True)
    notification_methods = db.Column(db.JSON, default=lambda: ["email"])

    def to_dict(self):
        return {
            "id": self.id,
            "alert_type": self.alert_type,
            "threshold_days": self.threshold_days,
            "is_enabled": self.is_enabled,
            "notification_methods": list(self.notification_methods or []),
        }


class DefaultRetentionPolicy(db.Model):
    """Default retention period per data category (by name, no FK)."""
    __tablename__ = "default_retention_policies"

    id = db.Column(db.String(50), primary_key=True)
    data_category = db.Column(db.String(100), nullable=False)
    retention_period = db.Column(db.String(50), nullable=False)
    legal_basis = db.Column(db.String(50))
    description = db.Column(db.Text)

    def to_dict(self):
        return {
            "id": self.id,
            "data_category": self.data_category,
            "retention_period": self.retention_period,
            "legal_basis": self.legal_basis,
            "description": self.description,
        }


REFERENCE_MODELS = (
    DataCategoryRef,
    ConsentStatusRef,
    DsarStatusRef,
    RegulationRef,
    IncidentStatusRef,
)

DEFAULT_CONFIG_MODELS = (DefaultAlertSetting, DefaultRetentionPolicy)

# Everything the schema bootstrapper creates, in creation order.
INSTALLATION_MODELS = (InstallationSetting,) + REFERENCE_MODELS + DEFAULT_CONFIG_MODELS
