# Overview: Flask extension instances for database and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy import event

db = SQLAlchemy()
migrate = Migrate()


def _unicode_lower(value):
    if value is None:
        return None
    return str(value).lower()


def _configure_sqlite_connection(dbapi_connection, connection_record):
    """
    Enable foreign key constraints for SQLite and replace its ASCII-only
    lower() with Python's, so func.lower() folds "Ñ" like str.lower().
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def register_engine_events(app) -> None:
    """Attach per-connection hooks to the app's engine (SQLite only)."""
    with app.app_context():
        engine = db.engine
        if engine.dialect.name == "sqlite" and not event.contains(engine, "connect", _configure_sqlite_connection):
            event.listen(engine, "connect", _configure_sqlite_connection)
