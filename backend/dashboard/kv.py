"""
Key-value store over the kv_store table.

Values are arbitrary JSON documents. Keys are namespaced by prefix,
e.g. ``project:PRJ-001`` or ``sharepoint_request:SPS-2025-0001``.
Callers own the session and commit through these helpers.
"""
import logging
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import KVEntry

logger = logging.getLogger(__name__)

PROJECT_PREFIX = "project:"

def get_value(db: Session, key: str) -> Optional[Any]:
    row = db.get(KVEntry, key)
    return row.value if row else None

def set_value(db: Session, key: str, value: Any) -> None:
    row = db.get(KVEntry, key)
    if row is None:
        db.add(KVEntry(key=key, value=value))
    else:
        row.value = value
    db.commit()
    logger.debug("kv set %s", key)

def delete_value(db: Session, key: str) -> bool:
    row = db.get(KVEntry, key)
    if row is None:
        return False
    db.delete(row)
    db.commit()
    logger.debug("kv delete %s", key)
    return True

def get_by_prefix(db: Session, prefix: str) -> List[Any]:
    stmt = (
        select(KVEntry)
        .where(KVEntry.key.startswith(prefix, autoescape=True))
        .order_by(KVEntry.key)
    )
    return [r.value for r in db.execute(stmt).scalars().all()]

def project_key(code: str) -> str:
    return f"{PROJECT_PREFIX}{code}"

def list_projects(db: Session) -> List[dict]:
    return get_by_prefix(db, PROJECT_PREFIX)

def upsert_project(db: Session, code: str, record: dict) -> None:
    set_value(db, project_key(code), record)
