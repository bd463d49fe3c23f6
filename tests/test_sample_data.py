"""
Sample data tests: generation, owner handling and removal.
"""

from datetime import timedelta

import pytest

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
from privacy_guard.services import install_service as svc
from privacy_guard.services.sample_data import (
    SAMPLE_USER,
    SAMPLE_USER_ID,
    generate_sample_data,
)

ADMIN = {"email": "dpo@privacyguard.io", "first_name": "Dana", "last_name": "Ortiz"}


def _count(model, **filters):
    stmt = db.select(db.func.count()).select_from(model)
    for column, value in filters.items():
        stmt = stmt.where(getattr(model, column) == value)
    return db.session.execute(stmt).scalar()


@pytest.fixture()
def real_owner():
    """A real account that owns real inventory."""
    user = User(id="real-owner", email="owner@acme-corp.io", first_name="Rita",
                last_name="Real", role="admin")
    db.session.add(user)
    db.session.commit()
    return "real-owner"


# ═══════════════════════════════════════════════════════════════
# Generation
# ═══════════════════════════════════════════════════════════════


class TestGenerateSampleData:

    def test_fixed_sample_set(self):
        result = generate_sample_data()
        assert result["counts"] == {
            "data_types": 5,
            "consent_records": 5,
            "dsar_requests": 4,
            "privacy_notices": 3,
            "incidents": 3,
            "domains": 2,
        }
        assert _count(DataType, is_sample=True) == 5
        assert _count(Incident, is_sample=True) == 3

    def test_rows_follow_naming_convention(self):
        generate_sample_data()
        for dt in db.session.execute(db.select(DataType)).scalars():
            assert dt.name.startswith("Sample ")
        for consent in db.session.execute(db.select(ConsentRecord)).scalars():
            assert consent.subject_email.endswith("@example.com")
        for notice in db.session.execute(db.select(PrivacyNotice)).scalars():
            assert notice.title.startswith("Sample ")

    def test_placeholder_owner(self):
        result = generate_sample_data()
        assert result["owner_id"] == SAMPLE_USER_ID

        owner = db.session.get(User, SAMPLE_USER_ID)
        assert owner.email == SAMPLE_USER["email"]
        assert owner.is_sample is True
        assert owner.role == "owner"
        assert _count(DsarRequest, user_id=SAMPLE_USER_ID) == 4

    def test_dsar_due_date_offset(self):
        generate_sample_data(dsar_due_days=30)
        for dsar in db.session.execute(db.select(DsarRequest)).scalars():
            assert dsar.due_date - dsar.submitted_at == timedelta(days=30)

    def test_custom_due_date_offset(self):
        generate_sample_data(dsar_due_days=45)
        dsar = db.session.execute(db.select(DsarRequest).limit(1)).scalar_one()
        assert dsar.due_date - dsar.submitted_at == timedelta(days=45)

    def test_incident_discovery_dates(self):
        generate_sample_data()
        incidents = {
            i.title: i for i in db.session.execute(db.select(Incident)).scalars()
        }
        breach = incidents["Sample Data Breach - Email Server"]
        phishing = incidents["Sample Phishing Attack"]
        assert breach.discovered_at < phishing.discovered_at
        assert phishing.discovered_at - breach.discovered_at == timedelta(days=5)

    def test_existing_domain_is_kept(self, real_owner):
        db.session.add(Domain(name="sample-website.com", user_id=real_owner))
        db.session.commit()

        result = generate_sample_data()
        assert result["counts"]["domains"] == 1
        kept = db.session.execute(
            db.select(Domain).where(Domain.name == "sample-website.com")
        ).scalar_one()
        assert kept.user_id == real_owner
        assert kept.is_sample is False


class TestAdminOwner:

    def test_new_admin_becomes_owner(self):
        result = generate_sample_data(admin_user=ADMIN)
        owner = db.session.get(User, result["owner_id"])
        assert owner.email == ADMIN["email"]
        assert owner.role == "owner"
        assert owner.is_sample is True
        assert db.session.get(User, SAMPLE_USER_ID) is None

    def test_existing_admin_only_name_changes(self):
        db.session.add(User(id="existing-admin", email=ADMIN["email"], first_name="Old",
                            last_name="Name", role="admin"))
        db.session.commit()

        result = generate_sample_data(admin_user=ADMIN)
        assert result["owner_id"] == "existing-admin"

        db.session.expire_all()
        owner = db.session.get(User, "existing-admin")
        assert owner.first_name == "Dana"
        assert owner.last_name == "Ortiz"
        assert owner.role == "admin"
        assert owner.is_sample is False

    def test_placeholder_id_already_taken(self):
        db.session.add(User(id=SAMPLE_USER_ID, email="someone@acme-corp.io", first_name="Sam",
                            last_name="Taken", role="admin"))
        db.session.commit()

        result = generate_sample_data()
        assert result["owner_id"] == SAMPLE_USER_ID

        db.session.expire_all()
        owner = db.session.get(User, SAMPLE_USER_ID)
        assert owner.email == "someone@acme-corp.io"
        assert owner.is_sample is False


# ═══════════════════════════════════════════════════════════════
# Removal
# ═══════════════════════════════════════════════════════════════


class TestRemoveSampleData:

    def test_removes_all_sample_rows_and_placeholder_owner(self, installed):
        result = svc.remove_sample_data()
        assert result["success"] is True
        assert result["removed_count"] == 23

        for model in (DataType, ConsentRecord, DsarRequest, PrivacyNotice, Incident, Domain):
            assert _count(model) == 0
        assert db.session.get(User, SAMPLE_USER_ID) is None
        assert svc.check_installation_status()["sample_data_exists"] is False

    def test_reference_data_survives_removal(self, installed):
        svc.remove_sample_data()
        status = svc.check_installation_status()
        assert status["is_installed"] is True
        assert status["has_reference_data"] is True

    def test_real_rows_matching_pattern_survive(self, installed, real_owner):
        db.session.add(DataType(
            name="Sample Size Survey Answers", category="behavioral", purpose="Research",
            source="Survey", user_id=real_owner,
        ))
        db.session.add(ConsentRecord(
            subject_email="tester@example.com", consent_type="marketing", status="granted",
            method="website", user_id=real_owner,
        ))
        db.session.commit()

        result = svc.remove_sample_data()
        assert result["removed_count"] == 23
        assert _count(DataType) == 1
        assert _count(ConsentRecord) == 1

    def test_referenced_sample_owner_is_kept(self, installed):
        db.session.add(PrivacyNotice(
            title="Real Notice", content="...", version="v2", regulation="GDPR",
            user_id=SAMPLE_USER_ID,
        ))
        db.session.commit()

        result = svc.remove_sample_data()
        assert result["success"] is True
        assert result["removed_count"] == 22
        assert db.session.get(User, SAMPLE_USER_ID) is not None

    def test_admin_created_by_install_is_removed(self):
        svc.perform_installation(include_sample_data=True, admin_user=ADMIN)
        result = svc.remove_sample_data()
        assert result["removed_count"] == 23
        assert _count(User) == 0

    def test_existing_admin_account_is_kept(self):
        db.session.add(User(id="existing-admin", email=ADMIN["email"], first_name="Old",
                            last_name="Name", role="admin"))
        db.session.commit()

        svc.perform_installation(include_sample_data=True, admin_user=ADMIN)
        result = svc.remove_sample_data()
        assert result["removed_count"] == 22
        owner = db.session.get(User, "existing-admin")
        assert owner is not None
        assert owner.is_sample is False

    def test_taken_placeholder_id_survives_install_and_removal(self):
        db.session.add(User(id=SAMPLE_USER_ID, email="someone@acme-corp.io", first_name="Sam",
                            last_name="Taken", role="admin"))
        db.session.commit()

        assert svc.perform_installation(include_sample_data=True)["success"] is True
        result = svc.remove_sample_data()
        assert result["removed_count"] == 22
        assert db.session.get(User, SAMPLE_USER_ID) is not None

    def test_second_removal_removes_nothing(self, installed):
        svc.remove_sample_data()
        assert svc.remove_sample_data()["removed_count"] == 0

    def test_failure_is_reported_not_raised(self, installed, monkeypatch):
        def boom(user_id):
            raise RuntimeError("lock timeout")

        monkeypatch.setattr(svc, "_user_is_referenced", boom)
        result = svc.remove_sample_data()
        assert result == {
            "success": False,
            "message": "Failed to remove sample data",
            "removed_count": 0,
        }
        # Rolled back: nothing was deleted
        assert _count(DataType, is_sample=True) == 5
