"""
CardBox – Collection viewer (card list)
========================================
Displays the cards of the selected collection in order, with per-card
edit / delete / reorder controls and buttons to add cards or study.
"""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from core.models import Card, Collection
from core.store import FlashcardStore
from ui.widgets import Theme, AccentButton, GhostButton, StatCard, Separator, font


class CollectionView(ctk.CTkFrame):
    """Content panel that shows one collection and its cards."""

    PLACEHOLDER = "← Select a collection to view its cards"

    def __init__(
        self,
        master,
        store: FlashcardStore,
        on_study: Callable[[str], None] | None = None,
        on_add_cards: Callable[[str], None] | None = None,
        on_edit_card: Callable[[Card], None] | None = None,
        **kw,
    ):
        kw.setdefault("fg_color", Theme.BG_DARK)
        kw.setdefault("corner_radius", 0)
        super().__init__(master, **kw)

        self._store = store
        self._on_study = on_study
        self._on_add_cards = on_add_cards
        self._on_edit_card = on_edit_card
        self._collection_id: str | None = None

        self._unsubscribe = store.subscribe(self.refresh)
        self.clear()

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def show_collection(self, collection_id: str | None) -> None:
        self._collection_id = collection_id
        self.refresh()

    def refresh(self) -> None:
        """Rebuild the view from the store."""
        if self._collection_id is None:
            self.clear()
            return
        collection = self._store.get_collection(self._collection_id)
        if collection is None:
            self._collection_id = None
            self.clear()
            return

        for w in self.winfo_children():
            w.destroy()
        cards = self._store.cards_in(collection.id)
        self._build_header(collection, cards)
        self._build_card_list(cards)

    def clear(self) -> None:
        for w in self.winfo_children():
            w.destroy()
        ctk.CTkLabel(
            self, text=self.PLACEHOLDER, font=font(15), text_color=Theme.TEXT_MUTED,
        ).pack(expand=True)

    def destroy(self) -> None:
        self._unsubscribe()
        super().destroy()

    # ------------------------------------------------------------------
    # Internal builders
    # ------------------------------------------------------------------

    def _build_header(self, collection: Collection, cards: list[Card]) -> None:
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=28, pady=(24, 0))

        title_row = ctk.CTkFrame(header, fg_color="transparent")
        title_row.pack(fill="x")

        ctk.CTkLabel(
            title_row, text=f"🃏  {collection.title}", font=font(22, "bold"),
            text_color=Theme.TEXT_PRIMARY,
        ).pack(side="left")

        if cards:
            AccentButton(
                title_row, text="▶  Start", width=120,
                command=lambda: self._on_study(collection.id) if self._on_study else None,
            ).pack(side="right")

        GhostButton(
            title_row, text="＋ Add new flashcard", anchor="center", width=170,
            command=lambda: self._on_add_cards(collection.id) if self._on_add_cards else None,
        ).pack(side="right", padx=8)

        ctk.CTkLabel(
            header,
            text=f"Created {collection.created_at.astimezone():%d %b %Y, %H:%M}",
            font=font(12), text_color=Theme.TEXT_MUTED,
        ).pack(anchor="w", pady=(4, 0))

        stat_row = ctk.CTkFrame(header, fg_color="transparent")
        stat_row.pack(fill="x", pady=(16, 0))
        done = sum(1 for c in cards if c.is_done)
        for label, value, color in [
            ("Cards", str(len(cards)), Theme.TEXT_PRIMARY),
            ("Done", str(done), Theme.SUCCESS),
            ("To learn", str(len(cards) - done), Theme.ACCENT),
        ]:
            StatCard(stat_row, label=label, value=value, color=color).pack(
                side="left", padx=(0, 12), fill="x", expand=True,
            )

        Separator(self).pack(fill="x", padx=28, pady=(20, 0))

    def _build_card_list(self, cards: list[Card]) -> None:
        if not cards:
            ctk.CTkLabel(
                self, text="Your list is empty. Add a flashcard to get started.",
                font=font(14), text_color=Theme.TEXT_MUTED,
            ).pack(pady=40)
            return

        scroll = ctk.CTkScrollableFrame(
            self, fg_color="transparent",
            scrollbar_button_color=Theme.BORDER,
            scrollbar_button_hover_color=Theme.ACCENT,
        )
        scroll.pack(fill="both", expand=True, padx=24, pady=12)

        last = len(cards) - 1
        for pos, card in enumerate(cards):
            row = ctk.CTkFrame(scroll, fg_color=Theme.BG_CARD, corner_radius=8, height=40)
            row.pack(fill="x", pady=2)

            done_box = ctk.CTkCheckBox(
                row, text="", width=24, fg_color=Theme.SUCCESS,
                command=lambda cid=card.id: self._store.toggle_card_done(cid),
            )
            if card.is_done:
                done_box.select()
            done_box.pack(side="left", padx=(10, 0))

            for text, w in [(card.front, 220), (card.back, 220)]:
                ctk.CTkLabel(
                    row, text=text, width=w, anchor="w", font=font(13),
                    text_color=Theme.TEXT_PRIMARY,
                ).pack(side="left", padx=8, pady=6)

            self._row_button(row, "🗑", lambda cid=card.id: self._store.delete_card(cid),
                             hover=Theme.DANGER)
            self._row_button(row, "✏️", lambda c=card: self._edit(c))
            self._row_button(row, "▼", lambda p=pos: self._move(p, p + 1), enabled=pos < last)
            self._row_button(row, "▲", lambda p=pos: self._move(p, p - 1), enabled=pos > 0)

    def _row_button(self, row, text: str, command, hover: str = Theme.BG_CARD_HOVER,
                    enabled: bool = True) -> None:
        ctk.CTkButton(
            row, text=text, width=32, height=28, corner_radius=6,
            fg_color="transparent", hover_color=hover, text_color=Theme.TEXT_SECONDARY,
            command=command, state="normal" if enabled else "disabled",
        ).pack(side="right", padx=2)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _move(self, position: int, destination: int) -> None:
        if self._collection_id is not None:
            self._store.move_cards(self._collection_id, {position}, destination)

    def _edit(self, card: Card) -> None:
        if self._on_edit_card:
            self._on_edit_card(card)
