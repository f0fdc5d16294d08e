"""QSS stylesheet and colour palette for MultiTimer."""

from __future__ import annotations

PALETTE: dict[str, str] = {
    "bg":           "#F4F5F8",
    "bg_secondary": "#FFFFFF",
    "surface":      "#EEF2FF",
    "accent":       "#2563EB",
    "accent2":      "#1D4ED8",
    "text":         "#1F2937",
    "text_muted":   "#6B7280",
    "success":      "#16A34A",
    "warning":      "#D97706",
    "danger":       "#DC2626",
    "border":       "#E5E7EB",
}


def hex_to_rgba(hex_color: str, alpha: int) -> str:
    """Convert '#RRGGBB' + 0-255 alpha to 'rgba(R, G, B, A)'."""
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return f"rgba({r}, {g}, {b}, {alpha})"


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 8px 20px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg_secondary']};
        border: none;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#iconButton {{
        background-color: transparent;
        color: {p['accent']};
        border: none;
        padding: 4px 8px;
        font-size: 13px;
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: none;
        padding: 4px 8px;
        font-size: 13px;
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit, QPlainTextEdit, QSpinBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 6px 10px;
    }}

    QLineEdit:focus, QPlainTextEdit:focus, QSpinBox:focus {{
        border-color: {p['accent']};
    }}

    /* ── scroll area ─────────────────────────────── */
    QScrollArea {{
        border: none;
        background-color: transparent;
    }}

    /* ── timer card ──────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    QFrame#card QLabel {{
        background-color: transparent;
    }}

    QLabel#cardTitle {{
        font-size: 18px;
        font-weight: 700;
    }}

    QLabel#cardDescription {{
        color: {p['text_muted']};
    }}

    QLabel#cardTime {{
        font-family: "Menlo", "Consolas", monospace;
        font-size: 34px;
        font-weight: 700;
    }}

    QLabel#emptyLabel {{
        color: {p['text_muted']};
        font-size: 15px;
    }}

    /* ── progress bar ────────────────────────────── */
    QProgressBar {{
        background-color: {p['border']};
        border: none;
        border-radius: 4px;
        max-height: 8px;
    }}

    QProgressBar::chunk {{
        background-color: {p['accent']};
        border-radius: 4px;
    }}

    QProgressBar[finished="true"]::chunk {{
        background-color: {p['danger']};
    }}
    """
