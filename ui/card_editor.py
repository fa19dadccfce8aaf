"""
CardBox – Card editor dialog
=============================
Modal window with two modes:
  • **Create** – any number of front/back rows, saved as one batch.
  • **Edit** – a single prefilled row for an existing card, plus delete.

The Save button stays disabled until every row has both a front and a
back.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

import customtkinter as ctk

from core.models import Card
from core.store import FlashcardStore
from ui.widgets import Theme, AccentButton, DangerButton, GhostButton, Separator, font


class CardEditor(ctk.CTkToplevel):
    """Top-level modal window for adding or editing flashcards."""

    WIDTH = 720
    HEIGHT = 540

    def __init__(
        self,
        master,
        store: FlashcardStore,
        collection_id: str | None = None,
        card: Card | None = None,
        on_complete: Callable[[], None] | None = None,
        **kw,
    ):
        super().__init__(master, **kw)
        if card is None and collection_id is None:
            raise ValueError("CardEditor needs a collection_id or a card")

        self._store = store
        self._card = card
        self._collection_id = card.collection_id if card else collection_id
        self._on_complete = on_complete
        self._rows: List[Tuple[ctk.CTkEntry, ctk.CTkEntry]] = []

        self.title("Edit flashcard" if card else "Add new flashcard")
        self.geometry(f"{self.WIDTH}x{self.HEIGHT}")
        self.resizable(False, False)
        self.configure(fg_color=Theme.BG_DARK)
        self.grab_set()

        self._build()
        if card is not None:
            self._add_row(card.front, card.back)
        else:
            self._add_row()

    # ==================================================================
    # Layout
    # ==================================================================

    def _build(self) -> None:
        ctk.CTkLabel(
            self, text="✏️  Edit flashcard" if self._card else "＋  Add new flashcard",
            font=font(20, "bold"), text_color=Theme.TEXT_PRIMARY,
        ).pack(anchor="w", padx=24, pady=(20, 4))

        hdr = ctk.CTkFrame(self, fg_color="transparent")
        hdr.pack(fill="x", padx=24)
        for text in ("Front", "Back"):
            ctk.CTkLabel(
                hdr, text=text, width=300, anchor="w", font=font(12, "bold"),
                text_color=Theme.TEXT_MUTED,
            ).pack(side="left", padx=(0, 12))

        Separator(self).pack(fill="x", padx=24, pady=(6, 0))

        self._rows_frame = ctk.CTkScrollableFrame(
            self, fg_color="transparent",
            scrollbar_button_color=Theme.BORDER,
            scrollbar_button_hover_color=Theme.ACCENT,
        )
        self._rows_frame.pack(fill="both", expand=True, padx=16, pady=8)

        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.pack(fill="x", padx=24, pady=(0, 20))

        if self._card is None:
            GhostButton(bottom, text="＋ Another card", command=self._add_row,
                        width=140).pack(side="left")
        else:
            DangerButton(bottom, text="Delete", command=self._delete,
                         width=100).pack(side="left")

        self._save_btn = AccentButton(bottom, text="Save", command=self._save, width=120)
        self._save_btn.pack(side="right")
        GhostButton(bottom, text="Cancel", command=self.destroy, anchor="center",
                    width=90).pack(side="right", padx=8)

    def _add_row(self, front: str = "", back: str = "") -> None:
        row = ctk.CTkFrame(self._rows_frame, fg_color="transparent")
        row.pack(fill="x", pady=4)
        entries = []
        for value in (front, back):
            entry = ctk.CTkEntry(
                row, width=300, fg_color=Theme.BG_CARD, border_color=Theme.BORDER,
                text_color=Theme.TEXT_PRIMARY, font=font(14),
            )
            entry.insert(0, value)
            entry.bind("<KeyRelease>", lambda _: self._update_save_state())
            entry.pack(side="left", padx=(8, 4))
            entries.append(entry)
        self._rows.append((entries[0], entries[1]))
        entries[0].focus_set()
        self._update_save_state()

    # ==================================================================
    # Actions
    # ==================================================================

    def _pairs(self) -> List[Tuple[str, str]]:
        return [(f.get(), b.get()) for f, b in self._rows]

    def _update_save_state(self) -> None:
        filled = all(f.strip() and b.strip() for f, b in self._pairs())
        self._save_btn.configure(state="normal" if filled else "disabled")

    def _save(self) -> None:
        pairs = self._pairs()
        if self._card is not None:
            front, back = pairs[0]
            self._store.edit_card(self._card.id, front, back)
        else:
            self._store.add_cards(self._collection_id, pairs)
        self._finish()

    def _delete(self) -> None:
        if self._card is not None:
            self._store.delete_card(self._card.id)
        self._finish()

    def _finish(self) -> None:
        if self._on_complete:
            self._on_complete()
        self.destroy()
