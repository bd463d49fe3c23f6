#!/usr/bin/env python3
"""Show row counts for the installer-owned tables and the sample rows."""
import sys
sys.path.insert(0, ".")

from privacy_guard import create_app
from privacy_guard.models import db
from privacy_guard.models.installation import INSTALLATION_MODELS
from privacy_guard.models.inventory import SAMPLE_MODELS
from privacy_guard.services.install_service import check_installation_status

app = create_app()
with app.app_context():
    print("  Installer tables")
    total = 0
    for model in INSTALLATION_MODELS:
        name = model.__tablename__
        try:
            c = db.session.execute(db.text(f'SELECT COUNT(*) FROM "{name}"')).scalar()
        except Exception:
            db.session.rollback()
            print(f"    {name:.<34} missing")
            continue
        total += c
        print(f"    {name:.<34} {c}")
    print(f"    {'TOTAL':.<34} {total}")

    print("  Sample rows (is_sample)")
    for model in SAMPLE_MODELS:
        c = db.session.execute(
            db.select(db.func.count()).select_from(model).where(model.is_sample.is_(True))
        ).scalar()
        print(f"    {model.__tablename__:.<34} {c}")

    status = check_installation_status()
    print(f"  Installed: {status['is_installed']} ({status['installation_date'] or '-'})")
