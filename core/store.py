"""
CardBox – Flashcard store
==========================
Single source of truth for collections and cards.  Holds both lists in
memory, persists the affected list after every mutation, and notifies
subscribers (the UI) once per change.

Nothing here raises for bad input: unknown ids, blank text and empty
batches are silent no-ops.  Reporting those is the caller's job.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.models import Card, Collection, DEFAULT_DUE_DELAY, utcnow
from db.slots import ListSlot, cards_slot, collections_slot

log = logging.getLogger(__name__)

Listener = Callable[[], None]


def _clean(text: str) -> str:
    return text.strip() if isinstance(text, str) else ""


def move_items(items: Sequence, source: Iterable[int], destination: int) -> Optional[list]:
    """Move the items at *source* positions so the block starts at *destination*.

    Returns the reordered list, or ``None`` when any index is out of range.
    The moved items keep their relative order.
    """
    n = len(items)
    offsets = sorted(set(source))
    if not offsets or offsets[0] < 0 or offsets[-1] >= n:
        return None
    if destination < 0 or destination > n:
        return None

    picked = set(offsets)
    moving = [items[i] for i in offsets]
    rest = [item for i, item in enumerate(items) if i not in picked]
    dest = min(destination, len(rest))
    return rest[:dest] + moving + rest[dest:]


class FlashcardStore:
    """In-memory + persisted authority for collections and cards."""

    def __init__(
        self,
        collections: Optional[ListSlot[Collection]] = None,
        cards: Optional[ListSlot[Card]] = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._collections_slot = collections if collections is not None else collections_slot()
        self._cards_slot = cards if cards is not None else cards_slot()
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

        self._collections: List[Collection] = self._collections_slot.load()
        self._cards: List[Card] = self._cards_slot.load()
        log.info(
            "Store ready: %d collection(s), %d card(s)",
            len(self._collections), len(self._cards),
        )

    # ==================================================================
    #  SUBSCRIPTIONS
    # ==================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every change. Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                log.exception("Store listener %r failed", listener)

    # ==================================================================
    #  READS
    # ==================================================================

    @property
    def collections(self) -> List[Collection]:
        with self._lock:
            return list(self._collections)

    @property
    def cards(self) -> List[Card]:
        with self._lock:
            return list(self._cards)

    def get_collection(self, collection_id: str) -> Optional[Collection]:
        with self._lock:
            return next((c for c in self._collections if c.id == collection_id), None)

    def get_card(self, card_id: str) -> Optional[Card]:
        with self._lock:
            return next((c for c in self._cards if c.id == card_id), None)

    def cards_in(self, collection_id: str) -> List[Card]:
        """All cards of *collection_id*, in current order."""
        with self._lock:
            return [c for c in self._cards if c.collection_id == collection_id]

    def card_count(self, collection_id: str) -> int:
        with self._lock:
            return sum(1 for c in self._cards if c.collection_id == collection_id)

    # ==================================================================
    #  COLLECTIONS
    # ==================================================================

    def add_collections(self, titles: Iterable[str]) -> List[Collection]:
        """Append one collection per non-blank title, in input order."""
        cleaned = [t for t in (_clean(title) for title in titles) if t]
        if not cleaned:
            return []
        created = [Collection(title=t, created_at=self._clock()) for t in cleaned]
        with self._lock:
            self._collections.extend(created)
            self._persist_collections()
        log.info("Added %d collection(s)", len(created))
        self._notify()
        return created

    def edit_collection_title(self, collection_id: str, new_title: str) -> None:
        title = _clean(new_title)
        if not title:
            return
        with self._lock:
            i = self._index_of(self._collections, collection_id)
            if i is None:
                return
            self._collections[i] = replace(self._collections[i], title=title)
            self._persist_collections()
        log.info("Renamed collection %s → %r", collection_id, title)
        self._notify()

    def delete_collection(self, collection_id: str) -> None:
        """Remove a collection together with all of its cards."""
        with self._lock:
            kept = [c for c in self._collections if c.id != collection_id]
            if len(kept) == len(self._collections):
                return
            self._collections = kept
            before = len(self._cards)
            self._cards = [c for c in self._cards if c.collection_id != collection_id]
            removed = before - len(self._cards)
            self._persist_collections()
            if removed:
                self._persist_cards()
        log.info("Deleted collection %s (%d card(s))", collection_id, removed)
        self._notify()

    # ==================================================================
    #  CARDS
    # ==================================================================

    def add_cards(self, collection_id: str, pairs: Iterable[Tuple[str, str]]) -> List[Card]:
        """Append a card for every pair whose front and back are both non-blank.

        The collection id is taken as given; it is not checked against the
        collection list.
        """
        created = []
        for front, back in pairs:
            f, b = _clean(front), _clean(back)
            if f and b:
                created.append(
                    Card(
                        collection_id=collection_id,
                        front=f,
                        back=b,
                        due_at=self._clock() + DEFAULT_DUE_DELAY,
                    )
                )
        if not created:
            return []
        with self._lock:
            self._cards.extend(created)
            self._persist_cards()
        log.info("Added %d card(s) to collection %s", len(created), collection_id)
        self._notify()
        return created

    def edit_card(self, card_id: str, new_front: str, new_back: str) -> None:
        front, back = _clean(new_front), _clean(new_back)
        if not front or not back:
            return
        with self._lock:
            i = self._index_of(self._cards, card_id)
            if i is None:
                return
            self._cards[i] = replace(self._cards[i], front=front, back=back)
            self._persist_cards()
        log.info("Edited card %s", card_id)
        self._notify()

    def delete_card(self, card_id: str) -> None:
        with self._lock:
            i = self._index_of(self._cards, card_id)
            if i is None:
                return
            del self._cards[i]
            self._persist_cards()
        log.info("Deleted card %s", card_id)
        self._notify()

    def toggle_card_done(self, card_id: str) -> None:
        with self._lock:
            i = self._index_of(self._cards, card_id)
            if i is None:
                return
            card = self._cards[i]
            self._cards[i] = replace(card, is_done=not card.is_done)
            self._persist_cards()
        self._notify()

    def defer_card(self, card_id: str) -> None:
        """Push a card's due date back by 24 hours."""
        with self._lock:
            i = self._index_of(self._cards, card_id)
            if i is None:
                return
            card = self._cards[i]
            self._cards[i] = replace(card, due_at=card.due_at + DEFAULT_DUE_DELAY)
            self._persist_cards()
        self._notify()

    def move_cards(self, collection_id: str, source: Iterable[int], destination: int) -> None:
        """Reorder the cards of one collection.

        *source* and *destination* are positions within that collection's
        cards, not the global list.  The reordered cards are written back
        into the same global slots, so other collections are untouched.
        """
        with self._lock:
            slots = [i for i, c in enumerate(self._cards) if c.collection_id == collection_id]
            current = [self._cards[i] for i in slots]
            reordered = move_items(current, source, destination)
            if reordered is None or reordered == current:
                return
            for i, card in zip(slots, reordered):
                self._cards[i] = card
            self._persist_cards()
        log.info("Reordered %d card(s) in collection %s", len(slots), collection_id)
        self._notify()

    # ==================================================================
    #  MAINTENANCE
    # ==================================================================

    def reset(self) -> None:
        """Drop every collection and card, in memory and on disk."""
        with self._lock:
            if not self._collections and not self._cards:
                return
            self._collections = []
            self._cards = []
            self._collections_slot.clear()
            self._cards_slot.clear()
        log.info("Store reset")
        self._notify()

    # ==================================================================
    #  INTERNAL
    # ==================================================================

    @staticmethod
    def _index_of(items: Sequence, item_id: str) -> Optional[int]:
        return next((i for i, item in enumerate(items) if item.id == item_id), None)

    def _persist_collections(self) -> None:
        if not self._collections_slot.save(self._collections):
            log.warning("Collections kept in memory only until the next successful save")

    def _persist_cards(self) -> None:
        if not self._cards_slot.save(self._cards):
            log.warning("Cards kept in memory only until the next successful save")
