"""
CardBox – Study session
========================
Sequential flip-card review over a snapshot of one collection's cards.
No scheduling: every card is shown once, in collection order.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from core.models import Card

log = logging.getLogger(__name__)


class StudySession:
    """State of one pass through a deck of cards.

    ``primary_action`` is the single "tap" of the study screen: the first
    call reveals the back, the second moves on.  After the last card the
    session is finished until ``restart`` is called.
    """

    def __init__(
        self,
        cards: Iterable[Card],
        on_delete: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._deck: List[Card] = list(cards)
        self._on_delete = on_delete
        self.index = 0
        self.is_back_shown = False
        self.is_finished = not self._deck

    @property
    def cards(self) -> List[Card]:
        return list(self._deck)

    @property
    def current_card(self) -> Card | None:
        if 0 <= self.index < len(self._deck):
            return self._deck[self.index]
        return None

    @property
    def progress_title(self) -> str:
        if not self._deck:
            return "0/0"
        return f"{self.index + 1}/{len(self._deck)}"

    @property
    def progress(self) -> float:
        """Fraction of the deck already passed, for a progress bar."""
        if not self._deck:
            return 0.0
        if self.is_finished:
            return 1.0
        return self.index / len(self._deck)

    def primary_action(self) -> None:
        if self.is_finished:
            return
        if not self.is_back_shown:
            self.is_back_shown = True
        else:
            self.go_next()

    def go_next(self) -> None:
        self.is_back_shown = False
        if self.index + 1 < len(self._deck):
            self.index += 1
        else:
            self.is_finished = True

    def delete_current(self) -> None:
        """Delete the shown card (through the callback) and drop it from the deck."""
        card = self.current_card
        if card is None:
            return
        if self._on_delete is not None:
            self._on_delete(card.id)
        self._deck = [c for c in self._deck if c.id != card.id]
        log.info("Removed card %s from study session", card.id)
        if not self._deck:
            self.is_finished = True
            return
        if self.index >= len(self._deck):
            self.index = max(0, len(self._deck) - 1)
        self.is_back_shown = False

    def restart(self) -> None:
        self.index = 0
        self.is_back_shown = False
        self.is_finished = not self._deck
