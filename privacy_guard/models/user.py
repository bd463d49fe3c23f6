"""
User model.

Only the columns the rest of Privacy Guard relies on: identity, display name
and the coarse role (owner, admin, viewer). Authentication itself is handled
outside this service.
"""

import uuid
from datetime import datetime, timezone

from privacy_guard.models import db


def _uuid_str():
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=_uuid_str)
    email = db.Column(db.String(255), unique=True)
    first_name = db.Column(db.String(120))
    last_name = db.Column(db.String(120))
    profile_image_url = db.Column(db.String(500))
    role = db.Column(db.String(20), nullable=False, default="viewer")  # owner, admin, viewer
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role,
            "is_sample": self.is_sample,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
