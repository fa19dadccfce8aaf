"""
CardBox – Collection & Card value types
========================================
Immutable records held by the store, plus their plain-dict codec used by
the persistence slots.  Keys match the persisted layout
(``createdAt``, ``collectionId``, ``isDone``, ``dueAt``).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

DEFAULT_DUE_DELAY = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

def encode_timestamp(value: datetime) -> str:
    """Serialise to ISO-8601, naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def decode_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 string or numeric Unix epoch seconds."""
    if isinstance(raw, bool):
        raise TypeError("timestamp cannot be a bool")
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(raw, tz=timezone.utc)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"timestamp out of range: {raw!r}") from exc
    if isinstance(raw, str):
        value = datetime.fromisoformat(raw)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
    raise TypeError(f"unsupported timestamp {raw!r}")


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# Collection – a named group of flashcards
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Collection:
    title: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "createdAt": encode_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Collection":
        return cls(
            id=_require_str(data, "id"),
            title=_require_str(data, "title"),
            created_at=decode_timestamp(data["createdAt"]),
        )

    def __repr__(self) -> str:
        return f"<Collection id={self.id} title={self.title!r}>"


# ---------------------------------------------------------------------------
# Card – a front/back pair owned (by id) by one collection
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Card:
    collection_id: str
    front: str
    back: str
    id: str = field(default_factory=new_id)
    is_done: bool = False
    due_at: datetime = field(default_factory=lambda: utcnow() + DEFAULT_DUE_DELAY)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "collectionId": self.collection_id,
            "front": self.front,
            "back": self.back,
            "isDone": self.is_done,
            "dueAt": encode_timestamp(self.due_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        is_done = data.get("isDone", False)
        if not isinstance(is_done, bool):
            raise TypeError("isDone must be a bool")
        kwargs: Dict[str, Any] = {}
        if "dueAt" in data:
            kwargs["due_at"] = decode_timestamp(data["dueAt"])
        return cls(
            id=_require_str(data, "id"),
            collection_id=_require_str(data, "collectionId"),
            front=_require_str(data, "front"),
            back=_require_str(data, "back"),
            is_done=is_done,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"<Card id={self.id} collection_id={self.collection_id} front={self.front!r}>"
