"""
Operational compliance records.

These are the day-to-day tables of Privacy Guard (data inventory, consent
log, DSAR queue, privacy notices, incident logbook, monitored domains).
The installer only touches them to insert or remove demo rows; every
sample-capable table therefore carries an ``is_sample`` flag.
"""

import uuid
from datetime import datetime, timezone

from privacy_guard.models import db


def _uuid_str():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


class DataType(db.Model):
    """One kind of personal data the organisation collects."""
    __tablename__ = "data_types"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    name = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.Text, nullable=False)  # personal, sensitive, financial, ...
    purpose = db.Column(db.Text, nullable=False)
    source = db.Column(db.Text, nullable=False)
    retention = db.Column(db.Text)
    legal_basis = db.Column(db.Text)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "purpose": self.purpose,
            "source": self.source,
            "retention": self.retention,
            "legal_basis": self.legal_basis,
            "user_id": self.user_id,
            "is_sample": self.is_sample,
        }


class ConsentRecord(db.Model):
    __tablename__ = "consent_records"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    subject_email = db.Column(db.Text, nullable=False, index=True)
    subject_name = db.Column(db.Text)
    consent_type = db.Column(db.Text, nullable=False)  # marketing, analytics, necessary
    status = db.Column(db.Text, nullable=False)  # see consent_status_refs
    timestamp = db.Column(db.DateTime(timezone=True), default=_utcnow)
    policy_version = db.Column(db.Text)
    ip_address = db.Column(db.Text)
    user_agent = db.Column(db.Text)
    method = db.Column(db.Text, nullable=False)  # website, api, email, mobile_app
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "subject_email": self.subject_email,
            "subject_name": self.subject_name,
            "consent_type": self.consent_type,
            "status": self.status,
            "policy_version": self.policy_version,
            "method": self.method,
            "user_id": self.user_id,
            "is_sample": self.is_sample,
        }


class DsarRequest(db.Model):
    """Data Subject Access Request."""
    __tablename__ = "dsar_requests"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    subject_email = db.Column(db.Text, nullable=False, index=True)
    subject_name = db.Column(db.Text)
    request_type = db.Column(db.Text, nullable=False)  # access, deletion, rectification, portability
    status = db.Column(db.String(30), default="submitted")  # see dsar_status_refs
    description = db.Column(db.Text)
    submitted_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    due_date = db.Column(db.DateTime(timezone=True), nullable=False)
    completed_at = db.Column(db.DateTime(timezone=True))
    assigned_to = db.Column(db.String(36), db.ForeignKey("users.id"))
    notes = db.Column(db.Text)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "subject_email": self.subject_email,
            "subject_name": self.subject_name,
            "request_type": self.request_type,
            "status": self.status,
            "description": self.description,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "assigned_to": self.assigned_to,
            "user_id": self.user_id,
            "is_sample": self.is_sample,
        }


class PrivacyNotice(db.Model):
    __tablename__ = "privacy_notices"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    title = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    version = db.Column(db.Text, nullable=False)
    regulation = db.Column(db.Text, nullable=False)  # GDPR, CCPA, UK_DPA, ...
    is_active = db.Column(db.Boolean, default=False)
    effective_date = db.Column(db.DateTime(timezone=True))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "version": self.version,
            "regulation": self.regulation,
            "is_active": self.is_active,
            "effective_date": self.effective_date.isoformat() if self.effective_date else None,
            "user_id": self.user_id,
            "is_sample": self.is_sample,
        }


class Incident(db.Model):
    """Incident / breach logbook entry."""
    __tablename__ = "incidents"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    severity = db.Column(db.String(20), nullable=False)  # low, medium, high, critical
    status = db.Column(db.String(30), nullable=False, default="open")  # see incident_status_refs
    affected_records = db.Column(db.Integer)
    discovered_at = db.Column(db.DateTime(timezone=True), nullable=False)
    reported_at = db.Column(db.DateTime(timezone=True))
    resolved_at = db.Column(db.DateTime(timezone=True))
    notification_required = db.Column(db.Boolean, default=False)
    notification_sent = db.Column(db.Boolean, default=False)
    steps = db.Column(db.Text)
    assigned_to = db.Column(db.String(36), db.ForeignKey("users.id"))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity,
            "status": self.status,
            "affected_records": self.affected_records,
            "discovered_at": self.discovered_at.isoformat() if self.discovered_at else None,
            "user_id": self.user_id,
            "is_sample": self.is_sample,
        }


class Domain(db.Model):
    """Domain watched by the SSL monitor."""
    __tablename__ = "domains"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    name = db.Column(db.Text, nullable=False, unique=True)
    is_active = db.Column(db.Boolean, default=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "is_active": self.is_active,
            "user_id": self.user_id,
            "is_sample": self.is_sample,
        }


# Tables the sample-data generator writes to, in insertion order.
SAMPLE_MODELS = (DataType, ConsentRecord, DsarRequest, PrivacyNotice, Incident, Domain)
