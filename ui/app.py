"""
CardBox – Main application window
==================================
Ties together the collection list, collection viewer, card editor and
study session into a single CustomTkinter application.  Every view reads
from and writes to one shared ``FlashcardStore``.
"""

from __future__ import annotations

import customtkinter as ctk

from core.models import Card
from core.store import FlashcardStore
from db.database import init_db
from ui.widgets import Theme
from ui.collection_list import CollectionList
from ui.collection_view import CollectionView
from ui.card_editor import CardEditor
from ui.study_session import StudySessionView


class CardBoxApp(ctk.CTk):
    """Root application window."""

    APP_TITLE = "CardBox — Flashcards"
    WIDTH = 1100
    HEIGHT = 720

    def __init__(self, store: FlashcardStore | None = None) -> None:
        super().__init__()

        # ── Window setup ──
        self.title(self.APP_TITLE)
        self.geometry(f"{self.WIDTH}x{self.HEIGHT}")
        self.minsize(900, 560)
        self.configure(fg_color=Theme.BG_DARK)

        ctk.set_appearance_mode("dark")

        if store is None:
            # Ensure database tables exist before the store loads
            init_db()
            store = FlashcardStore()
        self._store = store

        # ── Layout: collection list | content ──
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        self._list = CollectionList(self, store, on_select=self._on_collection_select)
        self._list.grid(row=0, column=0, sticky="ns")

        self._content = ctk.CTkFrame(self, fg_color=Theme.BG_DARK, corner_radius=0)
        self._content.grid(row=0, column=1, sticky="nsew")
        self._content.grid_rowconfigure(0, weight=1)
        self._content.grid_columnconfigure(0, weight=1)

        self._view = CollectionView(
            self._content, store,
            on_study=self._on_study,
            on_add_cards=self._on_add_cards,
            on_edit_card=self._on_edit_card,
        )
        self._view.grid(row=0, column=0, sticky="nsew")

        self._study_window: StudySessionView | None = None

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _on_collection_select(self, collection_id: str | None) -> None:
        self._view.show_collection(collection_id)

    def _on_study(self, collection_id: str) -> None:
        """Open the study session as a separate Toplevel window."""
        # Prevent multiple study windows
        if self._study_window is not None and self._study_window.winfo_exists():
            self._study_window.focus()
            return
        self._study_window = StudySessionView(
            self, self._store, collection_id, on_close=self._on_study_finish,
        )

    def _on_study_finish(self) -> None:
        self._study_window = None

    def _on_add_cards(self, collection_id: str) -> None:
        CardEditor(self, self._store, collection_id=collection_id)

    def _on_edit_card(self, card: Card) -> None:
        CardEditor(self, self._store, card=card)
