"""
CardBox – Durable list slots
=============================
Persistence adapter for the store.  A ``ListSlot`` owns one row of the
``kv_slots`` table and reads/writes a whole list at a time.

``load()`` never raises: missing, corrupt or undecodable data yields an
empty list.  ``save()`` never raises either; it encodes everything before
touching the database and commits in a single transaction, so a reader
never sees a half-written list.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.models import Card, Collection
from db.database import get_session
from db.models import Slot

log = logging.getLogger(__name__)

T = TypeVar("T")

COLLECTIONS_KEY = "saved_collections_v1"
CARDS_KEY = "saved_cards_v1"


class ListSlot(Generic[T]):
    """One durable slot holding a JSON array of records."""

    def __init__(
        self,
        key: str,
        decode: Callable[[Dict[str, Any]], T],
        encode: Callable[[T], Dict[str, Any]],
        session_factory: Callable[[], Session] = get_session,
    ) -> None:
        self.key = key
        self._decode = decode
        self._encode = encode
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self) -> List[T]:
        s = self._session_factory()
        try:
            row = s.get(Slot, self.key)
            payload = row.payload if row is not None else None
        except SQLAlchemyError:
            log.exception("Could not read slot %r", self.key)
            return []
        finally:
            s.close()

        if payload is None:
            return []
        try:
            raw = json.loads(payload)
            if not isinstance(raw, list):
                raise TypeError(f"expected a JSON array, got {type(raw).__name__}")
            items = [self._decode(entry) for entry in raw]
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            log.warning("Discarding unreadable slot %r: %s", self.key, exc)
            return []
        log.info("Loaded %d item(s) from slot %r", len(items), self.key)
        return items

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, items: Iterable[T]) -> bool:
        """Overwrite the slot with *items*. Returns True on success."""
        try:
            payload = json.dumps([self._encode(item) for item in items], ensure_ascii=False)
            # SQLite stores UTF-8; lone surrogates would fail inside the driver
            payload.encode("utf-8")
        except (TypeError, ValueError, AttributeError):
            log.exception("Could not encode slot %r", self.key)
            return False

        s = self._session_factory()
        try:
            s.merge(Slot(key=self.key, payload=payload))
            s.commit()
        except SQLAlchemyError:
            s.rollback()
            log.exception("Could not write slot %r", self.key)
            return False
        finally:
            s.close()
        return True

    def clear(self) -> bool:
        """Remove the slot entirely. Returns True on success."""
        s = self._session_factory()
        try:
            row = s.get(Slot, self.key)
            if row is not None:
                s.delete(row)
                s.commit()
        except SQLAlchemyError:
            s.rollback()
            log.exception("Could not clear slot %r", self.key)
            return False
        finally:
            s.close()
        return True


# ── Factories ─────────────────────────────────────────────────────────

def collections_slot(session_factory: Callable[[], Session] = get_session) -> ListSlot[Collection]:
    return ListSlot(COLLECTIONS_KEY, Collection.from_dict, Collection.to_dict, session_factory)


def cards_slot(session_factory: Callable[[], Session] = get_session) -> ListSlot[Card]:
    return ListSlot(CARDS_KEY, Card.from_dict, Card.to_dict, session_factory)
