"""
Install Service — first-run setup of a Privacy Guard instance.

Flow (one transaction, see ``perform_installation``):
  Step 1: ensure_tables                  → create flag/lookup/config tables if absent
  Step 2: seed_reference_data            → 5 lookup catalogs, insert-if-absent on name
  Step 3: setup_default_configurations   → alert thresholds + retention policies
  Step 4: generate_sample_data           → optional demo rows (services.sample_data)
  Step 5: mark_installed                 → upsert the ``installation_complete`` flag

Status, sample-data removal and reset live here too. The seeding steps only
flush; ``install_transaction`` owns commit/rollback.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email
from flask import current_app

from privacy_guard.core.exceptions import AlreadyInstalledError, ValidationError
from privacy_guard.models import db
from privacy_guard.models.installation import (
    DEFAULT_CONFIG_MODELS,
    INSTALLATION_FLAG_KEY,
    INSTALLATION_MODELS,
    REFERENCE_MODELS,
    ConsentStatusRef,
    DataCategoryRef,
    DefaultAlertSetting,
    DefaultRetentionPolicy,
    DsarStatusRef,
    IncidentStatusRef,
    InstallationSetting,
    RegulationRef,
)
from privacy_guard.models.inventory import SAMPLE_MODELS
from privacy_guard.models.user import User
from privacy_guard.services import reference_catalogs as catalogs
from privacy_guard.services.helpers.upsert import dialect_insert, dialect_name
from privacy_guard.services.sample_data import DEFAULT_DSAR_DUE_DAYS, generate_sample_data

logger = logging.getLogger(__name__)

# pg_advisory_xact_lock key shared by every installer process
INSTALL_LOCK_KEY = 72_114_001

REFERENCE_CATALOGS = (
    (DataCategoryRef, catalogs.DATA_CATEGORIES),
    (ConsentStatusRef, catalogs.CONSENT_STATUSES),
    (DsarStatusRef, catalogs.DSAR_STATUSES),
    (RegulationRef, catalogs.REGULATIONS),
    (IncidentStatusRef, catalogs.INCIDENT_STATUSES),
)

DEFAULT_CONFIG_CATALOGS = (
    (DefaultAlertSetting, catalogs.DEFAULT_ALERT_SETTINGS),
    (DefaultRetentionPolicy, catalogs.DEFAULT_RETENTION_POLICIES),
)

REFERENCE_KINDS = {
    "categories": DataCategoryRef,
    "consent-statuses": ConsentStatusRef,
    "dsar-statuses": DsarStatusRef,
    "regulations": RegulationRef,
    "incident-statuses": IncidentStatusRef,
}

ADMIN_USER_FIELDS = ("email", "first_name", "last_name")

_NEGATIVE_STATUS = {
    "is_installed": False,
    "has_reference_data": False,
    "has_default_configurations": False,
    "sample_data_exists": False,
    "installation_date": None,
}


# ═════════════════════════════════════════════════════════════════════════════
# STATUS
# ═════════════════════════════════════════════════════════════════════════════


def _has_rows(model) -> bool:
    return db.session.execute(db.select(model.__table__).limit(1)).first() is not None


def _has_sample_rows(model) -> bool:
    stmt = db.select(model.id).where(model.is_sample.is_(True)).limit(1)
    return db.session.execute(stmt).first() is not None


def check_installation_status() -> dict:
    """Report which installation steps have run.

    Never raises: a failed query (missing table, lost connection) is logged
    and reported as a fully negative status.

    Returns:
        {"is_installed", "has_reference_data", "has_default_configurations",
         "sample_data_exists", "installation_date"}
    """
    try:
        flag = db.session.get(InstallationSetting, INSTALLATION_FLAG_KEY)
        return {
            "is_installed": flag is not None,
            "has_reference_data": all(_has_rows(m) for m in REFERENCE_MODELS),
            "has_default_configurations": all(_has_rows(m) for m in DEFAULT_CONFIG_MODELS),
            "sample_data_exists": any(_has_sample_rows(m) for m in SAMPLE_MODELS),
            "installation_date": (
                flag.created_at.isoformat() if flag and flag.created_at else None
            ),
        }
    except Exception:
        db.session.rollback()
        logger.error("Installation status check failed", exc_info=True)
        return dict(_NEGATIVE_STATUS)


def require_not_installed() -> None:
    """Raise ``AlreadyInstalledError`` when the installation flag is present."""
    status = check_installation_status()
    if status["is_installed"]:
        raise AlreadyInstalledError(status["installation_date"])


def normalize_admin_user(data) -> dict | None:
    """Validate an admin identity payload; return it trimmed, or None if absent.

    Raises:
        ValidationError: not an object, a field is missing, or the email is invalid.
    """
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValidationError("admin_user must be an object")
    missing = [f for f in ADMIN_USER_FIELDS if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError("admin_user is incomplete", details={"missing": missing})
    try:
        email = validate_email(str(data["email"]).strip(), check_deliverability=False).normalized
    except EmailNotValidError as exc:
        raise ValidationError(f"Invalid admin email: {exc}", details={"field": "email"}) from exc
    return {
        "email": email,
        "first_name": str(data["first_name"]).strip()[:100],
        "last_name": str(data["last_name"]).strip()[:100],
    }


# ═════════════════════════════════════════════════════════════════════════════
# INSTALL STEPS
# ═════════════════════════════════════════════════════════════════════════════


def ensure_tables() -> list[str]:
    """Create the installer-owned tables that do not exist yet."""
    tables = [m.__table__ for m in INSTALLATION_MODELS]
    db.metadata.create_all(bind=db.session.connection(), tables=tables, checkfirst=True)
    return [t.name for t in tables]


def _insert_catalog(model, rows, conflict_column: str) -> int:
    stmt = dialect_insert(model).values([dict(row) for row in rows])
    stmt = stmt.on_conflict_do_nothing(index_elements=[conflict_column])
    return max(db.session.execute(stmt).rowcount or 0, 0)


def seed_reference_data() -> dict:
    """Insert every reference catalog row whose ``name`` is not present yet.

    Existing rows (including hand-edited ones) are left untouched.
    Returns the number of rows inserted per table.
    """
    counts = {}
    for model, rows in REFERENCE_CATALOGS:
        counts[model.__tablename__] = _insert_catalog(model, rows, "name")
    db.session.flush()
    logger.info("Reference data seeded (catalog v%s): %s", catalogs.CATALOG_VERSION, counts)
    return counts


def setup_default_configurations() -> dict:
    """Insert default alert settings and retention policies, skipping known ids."""
    counts = {}
    for model, rows in DEFAULT_CONFIG_CATALOGS:
        counts[model.__tablename__] = _insert_catalog(model, rows, "id")
    db.session.flush()
    logger.info("Default configurations set: %s", counts)
    return counts


def _mark_installed() -> datetime:
    """Upsert the installation flag; an existing row keeps its ``created_at``."""
    now = datetime.now(timezone.utc)
    stmt = dialect_insert(InstallationSetting).values(
        key=INSTALLATION_FLAG_KEY, value="true", created_at=now, updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["key"],
        set_={"value": stmt.excluded.value, "updated_at": now},
    )
    db.session.execute(stmt)
    created_at = db.session.execute(
        db.select(InstallationSetting.created_at).where(
            InstallationSetting.key == INSTALLATION_FLAG_KEY
        )
    ).scalar_one()
    return created_at or now


def _acquire_install_lock() -> bool:
    """Serialize concurrent installs on PostgreSQL. Released at commit/rollback."""
    if not current_app.config.get("INSTALL_ADVISORY_LOCK", True):
        return False
    if dialect_name() != "postgresql":
        return False
    db.session.execute(db.text("SELECT pg_advisory_xact_lock(:key)"), {"key": INSTALL_LOCK_KEY})
    logger.debug("Acquired install advisory lock %s", INSTALL_LOCK_KEY)
    return True


@contextmanager
def install_transaction():
    """Commit on success, roll back and re-raise on error, always release the session."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    finally:
        db.session.close()


def perform_installation(include_sample_data: bool = False, admin_user: dict | None = None) -> dict:
    """Run every install step inside one transaction.

    Args:
        include_sample_data: also generate the demo record set.
        admin_user: optional {"email", "first_name", "last_name"}; becomes the
            owner of the sample rows.

    Returns:
        {"success": True, "message": str, "details": {...}}

    Raises:
        Whatever a step raised, after the transaction was rolled back.
    """
    dsar_due_days = current_app.config.get("INSTALL_SAMPLE_DSAR_DUE_DAYS", DEFAULT_DSAR_DUE_DAYS)

    steps = [
        ("ensure_tables", ensure_tables),
        ("seed_reference_data", seed_reference_data),
        ("setup_default_configurations", setup_default_configurations),
    ]
    if include_sample_data:
        steps.append((
            "generate_sample_data",
            lambda: generate_sample_data(admin_user=admin_user, dsar_due_days=dsar_due_days),
        ))
    steps.append(("mark_installed", _mark_installed))

    logger.info(
        "Installation started (sample_data=%s, admin=%s)",
        include_sample_data, admin_user.get("email") if admin_user else None,
    )
    results = {}
    current = None
    try:
        with install_transaction():
            _acquire_install_lock()
            for name, step in steps:
                current = name
                results[name] = step()
    except Exception:
        logger.error(
            "Installation failed at step %s; rolled back", current,
            exc_info=True, extra={"install_step": current},
        )
        raise

    installed_at = results["mark_installed"]
    details = {
        "reference_data_seeded": True,
        "default_configurations_set": True,
        "sample_data_generated": include_sample_data,
        "installation_date": installed_at.isoformat(),
        "steps": [name for name, _ in steps],
        "counts": {
            "reference_data": results["seed_reference_data"],
            "default_configurations": results["setup_default_configurations"],
        },
    }
    if include_sample_data:
        details["counts"]["sample_data"] = results["generate_sample_data"]["counts"]
        details["sample_owner_id"] = results["generate_sample_data"]["owner_id"]

    logger.info("Installation completed: %s", details["counts"])
    return {
        "success": True,
        "message": "Installation completed successfully",
        "details": details,
    }


# ═════════════════════════════════════════════════════════════════════════════
# REMOVAL / RESET
# ═════════════════════════════════════════════════════════════════════════════


def _user_is_referenced(user_id: str) -> bool:
    for model in SAMPLE_MODELS:
        refs = [model.user_id == user_id]
        if hasattr(model, "assigned_to"):
            refs.append(model.assigned_to == user_id)
        if db.session.execute(db.select(model.id).where(db.or_(*refs)).limit(1)).first():
            return True
    return False


def remove_sample_data() -> dict:
    """Delete every ``is_sample`` row plus sample users nothing points at any more.

    Returns:
        {"success", "message", "removed_count"}; failures are logged and
        reported with ``success=False`` and ``removed_count=0``.
    """
    try:
        removed = 0
        for model in SAMPLE_MODELS:
            table = model.__table__
            result = db.session.execute(db.delete(table).where(table.c.is_sample.is_(True)))
            removed += result.rowcount or 0

        users = User.__table__
        candidates = db.session.execute(
            db.select(users.c.id).where(users.c.is_sample.is_(True))
        ).scalars().all()
        for user_id in candidates:
            if _user_is_referenced(user_id):
                logger.info("Keeping sample user %s: still referenced", user_id)
                continue
            removed += db.session.execute(
                db.delete(users).where(users.c.id == user_id)
            ).rowcount or 0

        db.session.commit()
        logger.info("Removed %d sample rows", removed)
        return {
            "success": True,
            "message": f"Removed {removed} sample records",
            "removed_count": removed,
        }
    except Exception:
        db.session.rollback()
        logger.error("Sample data removal failed", exc_info=True)
        return {"success": False, "message": "Failed to remove sample data", "removed_count": 0}


def reset_installation() -> dict:
    """Delete the installation flag and drop the lookup/config tables.

    Irreversible: the next install recreates and reseeds the tables.
    Operational tables and their rows are not touched.
    """
    try:
        db.session.execute(db.delete(InstallationSetting.__table__))
        cascade = " CASCADE" if dialect_name() == "postgresql" else ""
        for model in REFERENCE_MODELS + DEFAULT_CONFIG_MODELS:
            db.session.execute(db.text(f'DROP TABLE IF EXISTS "{model.__tablename__}"{cascade}'))
        db.session.commit()
        logger.warning("Installation reset: flag cleared, lookup and config tables dropped")
        return {"success": True, "message": "Installation reset successfully"}
    except Exception:
        db.session.rollback()
        logger.error("Installation reset failed", exc_info=True)
        return {"success": False, "message": "Failed to reset installation"}


# ═════════════════════════════════════════════════════════════════════════════
# LOOKUPS
# ═════════════════════════════════════════════════════════════════════════════


def list_reference_data(kind: str) -> list[dict]:
    """Return one reference table's rows ordered by ``sort_order``.

    Raises:
        ValidationError: ``kind`` is not one of ``REFERENCE_KINDS``.
    """
    model = REFERENCE_KINDS.get(kind)
    if model is None:
        raise ValidationError(
            "Unknown reference data type",
            details={"type": kind, "allowed": sorted(REFERENCE_KINDS)},
        )
    rows = db.session.execute(
        db.select(model).order_by(model.sort_order, model.name)
    ).scalars().all()
    return [row.to_dict() for row in rows]
