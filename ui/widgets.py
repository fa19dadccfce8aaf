"""
CardBox – Reusable CustomTkinter widgets
=========================================
Shared UI primitives used across multiple views.
"""

from __future__ import annotations

import customtkinter as ctk


# ---------------------------------------------------------------------------
# Colours / design tokens
# ---------------------------------------------------------------------------
class Theme:
    """Centralised colour palette – warm dark mode."""
    BG_DARK       = "#1b1a1a"
    BG_SIDEBAR    = "#232121"
    BG_CARD       = "#2c2929"
    BG_CARD_HOVER = "#3a3535"
    ACCENT        = "#fe8310"     # orange accent
    ACCENT_HOVER  = "#e0700a"
    CARD_FACE     = "#b23500"
    SUCCESS       = "#43d98a"
    DANGER        = "#bd0000"
    TEXT_PRIMARY   = "#f4f1ee"
    TEXT_SECONDARY = "#b5aca6"
    TEXT_MUTED     = "#7a716c"
    BORDER         = "#3d3838"
    FONT_FAMILY    = "Segoe UI"


def font(size: int = 13, weight: str = "normal") -> ctk.CTkFont:
    return ctk.CTkFont(family=Theme.FONT_FAMILY, size=size, weight=weight)


# ---------------------------------------------------------------------------
# Styled buttons
# ---------------------------------------------------------------------------
class AccentButton(ctk.CTkButton):
    """A consistently-styled accent button."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", Theme.ACCENT)
        kw.setdefault("hover_color", Theme.ACCENT_HOVER)
        kw.setdefault("text_color", "#ffffff")
        kw.setdefault("corner_radius", 8)
        kw.setdefault("font", font(14, "bold"))
        kw.setdefault("height", 36)
        super().__init__(master, text=text, command=command, **kw)


class DangerButton(ctk.CTkButton):
    """Red-toned button for destructive actions."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", Theme.DANGER)
        kw.setdefault("hover_color", "#9a0000")
        kw.setdefault("text_color", "#ffffff")
        kw.setdefault("corner_radius", 8)
        kw.setdefault("font", font(13))
        kw.setdefault("height", 32)
        super().__init__(master, text=text, command=command, **kw)


class GhostButton(ctk.CTkButton):
    """Transparent button (list rows, back links)."""

    def __init__(self, master, text: str = "", command=None, **kw):
        kw.setdefault("fg_color", "transparent")
        kw.setdefault("hover_color", Theme.BG_CARD_HOVER)
        kw.setdefault("text_color", Theme.TEXT_PRIMARY)
        kw.setdefault("anchor", "w")
        kw.setdefault("corner_radius", 6)
        kw.setdefault("font", font(13))
        kw.setdefault("height", 32)
        super().__init__(master, text=text, command=command, **kw)


# ---------------------------------------------------------------------------
# Stat card (mini dashboard widget)
# ---------------------------------------------------------------------------
class StatCard(ctk.CTkFrame):
    """Small rounded card that shows a label + large number."""

    def __init__(self, master, label: str = "", value: str = "0", color: str = Theme.ACCENT, **kw):
        kw.setdefault("fg_color", Theme.BG_CARD)
        kw.setdefault("corner_radius", 12)
        super().__init__(master, **kw)

        ctk.CTkLabel(
            self, text=label.upper(), font=font(11, "bold"), text_color=Theme.TEXT_MUTED,
        ).pack(padx=16, pady=(14, 0), anchor="w")

        self._value = ctk.CTkLabel(self, text=value, font=font(28, "bold"), text_color=color)
        self._value.pack(padx=16, pady=(2, 14), anchor="w")

    def set_value(self, v: str) -> None:
        self._value.configure(text=v)


class Separator(ctk.CTkFrame):
    def __init__(self, master, **kw):
        kw.setdefault("fg_color", Theme.BORDER)
        kw.setdefault("height", 1)
        super().__init__(master, **kw)
