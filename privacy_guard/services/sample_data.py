"""
Sample Data Generator — demo records for a fresh install.

Inserts a fixed, clearly fake set of operational rows so a new Privacy Guard
instance has something to show:

    5 data types · 5 consent records · 4 DSARs · 3 privacy notices
    3 incidents  · 2 monitored domains

Every row is written with ``is_sample=True`` and also follows the
``"Sample …"`` / ``@example.com`` naming convention, so it can be told apart
from real data and bulk-removed later.

Rows are owned by a single user. When the installer passes an admin identity
that user is upserted (on ``email``) and becomes the owner; otherwise a
placeholder ``sample-admin@example.com`` owner is used. An owner row this
module creates is itself flagged as sample; a pre-existing account is not.

Nothing here commits; the caller owns the transaction.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from privacy_guard.models import db
from privacy_guard.models.inventory import (
    ConsentRecord,
    DataType,
    Domain,
    DsarRequest,
    Incident,
    PrivacyNotice,
)
from privacy_guard.models.user import User
from privacy_guard.services.helpers.upsert import dialect_insert

logger = logging.getLogger(__name__)

SAMPLE_USER_ID = "sample-admin-user"
SAMPLE_USER = {"email": "sample-admin@example.com", "first_name": "Sample", "last_name": "Admin"}

DEFAULT_DSAR_DUE_DAYS = 30


SAMPLE_DATA_TYPES = (
    {"name": "Sample Email Addresses", "description": "User email addresses for communication",
     "category": "personal", "purpose": "Marketing communications", "source": "Website signup form",
     "retention": "2 years", "legal_basis": "consent"},
    {"name": "Sample Payment Information", "description": "Credit card and billing data",
     "category": "financial", "purpose": "Payment processing", "source": "Checkout process",
     "retention": "7 years", "legal_basis": "contract"},
    {"name": "Sample Biometric Data", "description": "Fingerprint and facial recognition data",
     "category": "biometric", "purpose": "Security authentication", "source": "Mobile app",
     "retention": "1 year", "legal_basis": "consent"},
    {"name": "Sample Location Data", "description": "GPS coordinates and location history",
     "category": "location", "purpose": "Service delivery", "source": "Mobile app",
     "retention": "6 months", "legal_basis": "legitimate_interest"},
    {"name": "Sample Usage Analytics", "description": "Website usage and behavior data",
     "category": "behavioral", "purpose": "Service improvement", "source": "Website cookies",
     "retention": "2 years", "legal_basis": "legitimate_interest"},
)

SAMPLE_CONSENTS = (
    {"subject_email": "john.doe@example.com", "subject_name": "John Doe", "consent_type": "marketing",
     "status": "granted", "policy_version": "v1.0", "method": "website"},
    {"subject_email": "jane.smith@example.com", "subject_name": "Jane Smith", "consent_type": "analytics",
     "status": "granted", "policy_version": "v1.0", "method": "website"},
    {"subject_email": "bob.wilson@example.com", "subject_name": "Bob Wilson", "consent_type": "necessary",
     "status": "granted", "policy_version": "v1.0", "method": "api"},
    {"subject_email": "alice.johnson@example.com", "subject_name": "Alice Johnson", "consent_type": "marketing",
     "status": "withdrawn", "policy_version": "v1.0", "method": "email"},
    {"subject_email": "charlie.brown@example.com", "subject_name": "Charlie Brown", "consent_type": "biometric",
     "status": "pending", "policy_version": "v1.1", "method": "mobile_app"},
)

SAMPLE_DSARS = (
    {"subject_email": "john.doe@example.com", "subject_name": "John Doe", "request_type": "access",
     "description": "Request for all personal data", "status": "in_progress"},
    {"subject_email": "jane.smith@example.com", "subject_name": "Jane Smith", "request_type": "deletion",
     "description": "Request for data deletion", "status": "submitted"},
    {"subject_email": "bob.wilson@example.com", "subject_name": "Bob Wilson", "request_type": "rectification",
     "description": "Request to correct personal information", "status": "completed"},
    {"subject_email": "alice.johnson@example.com", "subject_name": "Alice Johnson", "request_type": "portability",
     "description": "Request for data export", "status": "submitted"},
)

SAMPLE_NOTICES = (
    {"title": "Sample Privacy Policy",
     "content": "This is a comprehensive sample privacy policy for demonstration purposes...",
     "version": "v1.0", "regulation": "GDPR", "is_active": True},
    {"title": "Sample Cookie Policy",
     "content": "This sample cookie policy explains how we use cookies...",
     "version": "v1.0", "regulation": "GDPR", "is_active": True},
    {"title": "Sample CCPA Notice",
     "content": "This notice is for California residents regarding their privacy rights...",
     "version": "v1.0", "regulation": "CCPA", "is_active": False},
)

# discovered_days_ago is turned into discovered_at at insertion time
SAMPLE_INCIDENTS = (
    {"title": "Sample Data Breach - Email Server",
     "description": "Unauthorized access to email server containing customer data",
     "severity": "high", "status": "resolved", "affected_records": 1500, "discovered_days_ago": 7},
    {"title": "Sample Phishing Attack", "description": "Phishing email sent to employees",
     "severity": "medium", "status": "investigating", "affected_records": 0, "discovered_days_ago": 2},
    {"title": "Sample System Vulnerability",
     "description": "Security vulnerability discovered in payment system",
     "severity": "critical", "status": "open", "affected_records": 5000, "discovered_days_ago": 1},
)

SAMPLE_DOMAINS = ("sample-website.com", "demo.example.org")


def upsert_sample_owner(admin_user: dict | None = None) -> str:
    """Insert or refresh the user that owns the sample rows; return its id.

    A supplied ``admin_user`` (``email``, ``first_name``, ``last_name``) is
    inserted as ``owner``. If the email already exists only the name columns
    change; the existing id, role and sample flag are kept. A row created
    here is flagged as sample, so sample removal takes it away again.

    Without an admin the placeholder owner is used. A user already holding
    the placeholder id is reused untouched, whatever its email.
    """
    if admin_user:
        identity = admin_user
        new_id = str(uuid.uuid4())
    else:
        existing = db.session.get(User, SAMPLE_USER_ID)
        if existing is not None:
            logger.debug("Sample owner id %s already taken; reusing it", SAMPLE_USER_ID)
            return existing.id
        identity = SAMPLE_USER
        new_id = SAMPLE_USER_ID

    now = datetime.now(timezone.utc)
    stmt = dialect_insert(User).values(
        id=new_id,
        email=identity["email"],
        first_name=identity["first_name"],
        last_name=identity["last_name"],
        role="owner",
        is_sample=True,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["email"],
        set_={
            "first_name": stmt.excluded.first_name,
            "last_name": stmt.excluded.last_name,
            "updated_at": now,
        },
    )
    db.session.execute(stmt)

    user_id = db.session.execute(
        db.select(User.id).where(User.email == identity["email"])
    ).scalar_one()
    logger.debug("Sample owner %s resolved to id=%s", identity["email"], user_id)
    return user_id


def generate_sample_data(admin_user: dict | None = None, dsar_due_days: int = DEFAULT_DSAR_DUE_DAYS) -> dict:
    """Insert the fixed sample set and return row counts per table.

    DSAR due dates are ``now + dsar_due_days`` at insertion time, so two
    installs never produce identical rows.
    """
    now = datetime.now(timezone.utc)
    owner_id = upsert_sample_owner(admin_user)

    data_types = [
        DataType(user_id=owner_id, is_sample=True, **row) for row in SAMPLE_DATA_TYPES
    ]
    consents = [
        ConsentRecord(user_id=owner_id, is_sample=True, timestamp=now, **row)
        for row in SAMPLE_CONSENTS
    ]
    due_date = now + timedelta(days=dsar_due_days)
    dsars = [
        DsarRequest(user_id=owner_id, is_sample=True, submitted_at=now, due_date=due_date, **row)
        for row in SAMPLE_DSARS
    ]
    notices = [
        PrivacyNotice(user_id=owner_id, is_sample=True, effective_date=now, **row)
        for row in SAMPLE_NOTICES
    ]
    incidents = []
    for row in SAMPLE_INCIDENTS:
        fields = {k: v for k, v in row.items() if k != "discovered_days_ago"}
        incidents.append(Incident(
            user_id=owner_id,
            is_sample=True,
            discovered_at=now - timedelta(days=row["discovered_days_ago"]),
            **fields,
        ))

    db.session.add_all(data_types + consents + dsars + notices + incidents)
    db.session.flush()

    # Domain names are unique; an existing (real) domain with the same name wins.
    domains_added = 0
    for name in SAMPLE_DOMAINS:
        stmt = dialect_insert(Domain).values(
            id=str(uuid.uuid4()),
            name=name,
            is_active=True,
            user_id=owner_id,
            is_sample=True,
            created_at=now,
            updated_at=now,
        ).on_conflict_do_nothing(index_elements=["name"])
        domains_added += db.session.execute(stmt).rowcount or 0

    counts = {
        "data_types": len(data_types),
        "consent_records": len(consents),
        "dsar_requests": len(dsars),
        "privacy_notices": len(notices),
        "incidents": len(incidents),
        "domains": domains_added,
    }
    logger.info("Generated sample data for owner %s: %s", owner_id, counts)
    return {"owner_id": owner_id, "counts": counts}
