"""Export-Modul: Terminal-Darstellung (Rich) für geteilte Stundenpläne."""

from export.tui_renderer import day_title, render_day_rows, render_week_rows, week_header

__all__ = ["day_title", "render_day_rows", "render_week_rows", "week_header"]
