"""
Privacy Guard — SQLAlchemy models package.

The shared ``db`` instance lives here so every model module and service can
``from privacy_guard.models import db`` without import cycles.

Modules:
    user          — users (sample owner + real accounts)
    inventory     — operational compliance records (data types, consents,
                    DSARs, notices, incidents, domains)
    installation  — installation flag, reference lookups, default configs
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
