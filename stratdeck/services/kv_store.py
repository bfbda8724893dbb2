"""Key/value store backed by the kv_store table."""

from typing import Any

from sqlmodel import Session

from stratdeck.models.kv_store import KVEntry


def get(session: Session, key: str) -> dict[str, Any] | None:
    entry = session.get(KVEntry, key)
    return entry.value if entry else None


def set(session: Session, key: str, value: dict[str, Any]) -> None:
    entry = session.get(KVEntry, key)
    if entry is None:
        entry = KVEntry(key=key, value=value)
    else:
        entry.value = value
    session.add(entry)
    session.commit()


def delete(session: Session, key: str) -> None:
    entry = session.get(KVEntry, key)
    if entry is not None:
        session.delete(entry)
        session.commit()
