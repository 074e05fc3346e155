from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from messageboard.extensions import db
from messageboard.models.message import Message

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> bool:
    """
    Create the messages table (and its created_at index) when missing.

    Safe to run on every request and from several workers at once: existing
    tables are left untouched, and losing a CREATE race to another worker is
    not an error as long as the table exists afterwards.

    Returns True when this call created the table.
    """
    table = Message.__table__
    if inspect(engine).has_table(table.name):
        return False
    try:
        db.metadata.create_all(bind=engine, tables=[table], checkfirst=True)
    except SQLAlchemyError:
        if inspect(engine).has_table(table.name):
            logger.info("schema_race_lost", extra={"event": "schema_race_lost", "table": table.name})
            return False
        raise
    logger.info("schema_created", extra={"event": "schema_created", "table": table.name})
    return True
