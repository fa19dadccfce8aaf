"""
CardBox – Study Session window
===============================
• One card at a time: click / Space reveals the back, again moves on
• Trash button deletes the current card from the collection
• "Restart" and "Go to menu" once the last card is passed
"""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from core.store import FlashcardStore
from core.study import StudySession
from ui.widgets import Theme, AccentButton, GhostButton, font


class StudySessionView(ctk.CTkToplevel):

    W, H = 720, 560

    def __init__(self, master, store: FlashcardStore, collection_id: str,
                 on_close: Callable[[], None] | None = None, **kw):
        super().__init__(master, **kw)
        collection = store.get_collection(collection_id)
        self.title(f"Study – {collection.title if collection else 'CardBox'}")
        self.geometry(f"{self.W}x{self.H}")
        self.minsize(560, 440)
        self.configure(fg_color=Theme.BG_DARK)
        self.protocol("WM_DELETE_WINDOW", self._close)

        self._on_close = on_close
        self._session = StudySession(store.cards_in(collection_id), on_delete=store.delete_card)

        self.bind("<space>", lambda _: self._primary())
        self.bind("<Right>", lambda _: self._primary())

        self._build_ui()
        self._render()

    # ── layout ───────────────────────────────────────────────────────
    def _build_ui(self):
        top = ctk.CTkFrame(self, fg_color="transparent")
        top.pack(fill="x", padx=24, pady=(16, 0))

        GhostButton(top, text="‹  Back", command=self._close, width=80).pack(side="left")
        ctk.CTkButton(
            top, text="🗑", width=36, height=32, corner_radius=6,
            fg_color="transparent", hover_color=Theme.BG_CARD_HOVER,
            text_color=Theme.DANGER, font=font(16), command=self._delete_current,
        ).pack(side="right")
        self._progress_label = ctk.CTkLabel(
            top, text="", font=font(15, "bold"), text_color=Theme.TEXT_PRIMARY,
        )
        self._progress_label.pack(expand=True)

        self._progress_bar = ctk.CTkProgressBar(
            self, fg_color=Theme.BG_CARD, progress_color=Theme.ACCENT,
            corner_radius=6, height=6,
        )
        self._progress_bar.pack(fill="x", padx=24, pady=(12, 0))

        self._card_host = ctk.CTkFrame(self, fg_color="transparent")
        self._card_host.pack(fill="both", expand=True, padx=48, pady=24)

    def _render(self):
        for w in self._card_host.winfo_children():
            w.destroy()
        s = self._session
        self._progress_label.configure(text=s.progress_title)
        self._progress_bar.set(s.progress)

        if s.is_finished:
            self._build_finish()
            return

        card = s.current_card
        face = ctk.CTkFrame(
            self._card_host, corner_radius=20,
            fg_color=Theme.CARD_FACE if s.is_back_shown else Theme.BG_CARD,
            border_width=1, border_color=Theme.BORDER,
        )
        face.pack(fill="both", expand=True)

        side = ctk.CTkLabel(
            face, text="BACK" if s.is_back_shown else "FRONT",
            font=font(11, "bold"), text_color=Theme.TEXT_SECONDARY,
        )
        side.pack(pady=(20, 0))
        word = ctk.CTkLabel(
            face, text=card.back if s.is_back_shown else card.front,
            font=font(34, "bold"), text_color=Theme.TEXT_PRIMARY, wraplength=520,
        )
        word.pack(expand=True)
        hint = ctk.CTkLabel(
            face, text="Click for next card" if s.is_back_shown else "Click to reveal",
            font=font(13), text_color=Theme.TEXT_MUTED,
        )
        hint.pack(pady=(0, 24))
        for w in (face, side, word, hint):
            w.bind("<Button-1>", lambda _: self._primary())

    def _build_finish(self):
        inn = ctk.CTkFrame(self._card_host, fg_color="transparent")
        inn.pack(expand=True)

        if self._session.cards:
            title = "🎉  All cards reviewed!"
        else:
            title = "No cards"
        ctk.CTkLabel(inn, text=title, font=font(26, "bold"),
                     text_color=Theme.SUCCESS).pack(pady=(0, 24))

        row = ctk.CTkFrame(inn, fg_color="transparent")
        row.pack()
        if self._session.cards:
            AccentButton(row, text="Restart", command=self._restart,
                         width=140).pack(side="left", padx=6)
        GhostButton(row, text="Go to menu", command=self._close, anchor="center",
                    width=140).pack(side="left", padx=6)

    # ── actions ──────────────────────────────────────────────────────
    def _primary(self):
        self._session.primary_action()
        self._render()

    def _delete_current(self):
        self._session.delete_current()
        self._render()

    def _restart(self):
        self._session.restart()
        self._render()

    def _close(self):
        if self._on_close:
            self._on_close()
        self.destroy()
