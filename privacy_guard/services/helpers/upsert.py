"""
Dialect-aware ``INSERT … ON CONFLICT`` construction.

SQLAlchemy only exposes ``on_conflict_do_nothing`` / ``on_conflict_do_update``
on the dialect-specific ``insert()`` constructs, so the installer picks the
one matching the engine behind ``db.session``.

Usage:
    stmt = dialect_insert(DataCategoryRef).values(rows)
    db.session.execute(stmt.on_conflict_do_nothing(index_elements=["name"]))
"""

from sqlalchemy.dialects import postgresql, sqlite

from privacy_guard.core.exceptions import UnsupportedDialectError
from privacy_guard.models import db

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_name() -> str:
    """Return the dialect name of the engine bound to the current session."""
    return db.session.get_bind().dialect.name


def dialect_insert(model):
    """Return an upsert-capable Core ``insert()`` for *model* on the bound dialect.

    Built against ``model.__table__`` so ``rowcount`` on the result reports
    rows actually inserted (0 when the conflict clause skipped the row).
    """
    name = dialect_name()
    factory = _INSERT_BY_DIALECT.get(name)
    if factory is None:
        raise UnsupportedDialectError(name)
    return factory(getattr(model, "__table__", model))
