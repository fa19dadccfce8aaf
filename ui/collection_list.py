"""
CardBox – Collection list (sidebar)
====================================
Features:
  • Sortable list of collections with card counts
  • Right-click context menu: rename / delete
  • Reset-all-data action
"""

from __future__ import annotations

import tkinter as tk
from tkinter import messagebox
from typing import Callable

import customtkinter as ctk

from core.sorting import SortChoice, sort_collections
from core.store import FlashcardStore
from ui.widgets import Theme, AccentButton, GhostButton, Separator, font


class CollectionList(ctk.CTkFrame):
    """Left-hand sidebar listing the user's collections."""

    def __init__(
        self,
        master,
        store: FlashcardStore,
        on_select: Callable[[str | None], None] | None = None,
        **kw,
    ):
        kw.setdefault("fg_color", Theme.BG_SIDEBAR)
        kw.setdefault("corner_radius", 0)
        kw.setdefault("width", 280)
        super().__init__(master, **kw)

        self._store = store
        self._on_select = on_select
        self._selected_id: str | None = None
        self._sort_choice = SortChoice.NEWEST_FIRST

        # ── Header ──
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=16, pady=(20, 6))
        ctk.CTkLabel(
            header, text="🗂  My flashcards", font=font(18, "bold"),
            text_color=Theme.TEXT_PRIMARY,
        ).pack(side="left")

        Separator(self).pack(fill="x", padx=16, pady=(6, 8))

        # ── Actions ──
        btn_row = ctk.CTkFrame(self, fg_color="transparent")
        btn_row.pack(fill="x", padx=12, pady=(0, 4))

        AccentButton(btn_row, text="＋ Collection", command=self._create_collection,
                     width=130).pack(side="left", padx=4)

        self._sort_menu = ctk.CTkOptionMenu(
            btn_row,
            values=[c.value for c in SortChoice],
            command=self._on_sort_change,
            fg_color=Theme.BG_CARD, button_color=Theme.BG_CARD_HOVER,
            button_hover_color=Theme.ACCENT, text_color=Theme.TEXT_PRIMARY,
            width=120,
        )
        self._sort_menu.set(self._sort_choice.value)
        self._sort_menu.pack(side="right", padx=4)

        Separator(self).pack(fill="x", padx=16, pady=(8, 4))

        # ── Scrollable list ──
        self._list_frame = ctk.CTkScrollableFrame(
            self, fg_color="transparent", corner_radius=0,
            scrollbar_button_color=Theme.BORDER,
            scrollbar_button_hover_color=Theme.ACCENT,
        )
        self._list_frame.pack(fill="both", expand=True, padx=4, pady=4)

        GhostButton(
            self, text="⟲  Reset all data", command=self._confirm_reset,
            text_color=Theme.TEXT_MUTED,
        ).pack(fill="x", padx=12, pady=(4, 12))

        self._unsubscribe = store.subscribe(self.refresh)
        self.refresh()

    # ==================================================================
    #  PUBLIC
    # ==================================================================

    def refresh(self) -> None:
        """Rebuild the list from the store."""
        for w in self._list_frame.winfo_children():
            w.destroy()

        collections = sort_collections(self._store.collections, self._sort_choice)
        if self._selected_id and not any(c.id == self._selected_id for c in collections):
            # Selected collection was deleted
            self._selected_id = None
            if self._on_select:
                self._on_select(None)

        if not collections:
            ctk.CTkLabel(
                self._list_frame,
                text="Your list is empty.\nClick '＋ Collection' to start.",
                text_color=Theme.TEXT_MUTED, font=font(13), justify="center",
            ).pack(pady=40)
            return

        for col in collections:
            self._render_row(col.id, col.title, self._store.card_count(col.id))

    def destroy(self) -> None:
        self._unsubscribe()
        super().destroy()

    # ==================================================================
    #  RENDER
    # ==================================================================

    def _render_row(self, collection_id: str, title: str, count: int) -> None:
        row = ctk.CTkFrame(self._list_frame, fg_color="transparent")
        row.pack(fill="x", pady=1)

        is_sel = self._selected_id == collection_id
        btn = GhostButton(
            row,
            text=f"🃏 {title}",
            command=lambda cid=collection_id: self._select(cid),
            fg_color=Theme.BG_CARD if is_sel else "transparent",
        )
        btn.pack(side="left", fill="x", expand=True, padx=(4, 0))
        btn.bind("<Button-3>",
                 lambda e, cid=collection_id, t=title: self._context_menu(e, cid, t))

        ctk.CTkLabel(
            row, text=str(count), width=32, font=font(12, "bold"),
            text_color=Theme.ACCENT,
        ).pack(side="right", padx=(0, 8))

    # ==================================================================
    #  CONTEXT MENU
    # ==================================================================

    def _context_menu(self, event, collection_id: str, title: str):
        menu = tk.Menu(self, tearoff=0,
                       bg=Theme.BG_CARD, fg=Theme.TEXT_PRIMARY,
                       activebackground=Theme.ACCENT, activeforeground="#fff",
                       font=(Theme.FONT_FAMILY, 10), relief="flat", bd=0)
        menu.add_command(label="✏️  Rename",
                         command=lambda: self._rename_dialog(collection_id, title))
        menu.add_separator()
        menu.add_command(label="🗑  Delete",
                         command=lambda: self._confirm_delete(collection_id, title))
        try:
            menu.tk_popup(event.x_root, event.y_root)
        finally:
            menu.grab_release()

    def _rename_dialog(self, collection_id: str, current_title: str):
        dialog = ctk.CTkInputDialog(
            text=f"New title for “{current_title}”:", title="Rename collection",
        )
        title = dialog.get_input()
        if title and title.strip():
            self._store.edit_collection_title(collection_id, title)

    def _confirm_delete(self, collection_id: str, title: str):
        count = self._store.card_count(collection_id)
        ok = messagebox.askyesno(
            "Delete collection",
            f"Delete “{title}” and its {count} card(s)?\nThis cannot be undone.",
        )
        if ok:
            self._store.delete_collection(collection_id)

    def _confirm_reset(self):
        ok = messagebox.askyesno(
            "Reset all data",
            "Delete every collection and card?\nThis cannot be undone.",
        )
        if ok:
            self._store.reset()

    # ==================================================================
    #  ACTIONS
    # ==================================================================

    def _create_collection(self) -> None:
        dialog = ctk.CTkInputDialog(text="Collection title:", title="New collection")
        title = dialog.get_input()
        if not title or not title.strip():
            return
        created = self._store.add_collections([title])
        if created:
            self._select(created[0].id)

    def _on_sort_change(self, label: str) -> None:
        self._sort_choice = SortChoice(label)
        self.refresh()

    def _select(self, collection_id: str | None) -> None:
        changed = collection_id != self._selected_id
        self._selected_id = collection_id
        if changed:
            self.refresh()
        if self._on_select:
            self._on_select(collection_id)
