"""Terminal-Darstellung eines Stundenplan-Dokuments.

Wird von den CLI-Befehlen ``decode`` und ``show`` (Rich) verwendet. Die
Funktionen liefern reine Tabellenzeilen; das Zeichnen übernimmt der Aufrufer.
"""

from typing import TYPE_CHECKING

from config.defaults import DAY_LABELS, FULL_DAY_LABELS

if TYPE_CHECKING:
    from models.document import Document


def week_header(doc: "Document") -> list[str]:
    """Kopfzeile: [限, 時間, <aktive Tage>]."""
    return ["限", "時間"] + [DAY_LABELS[d] for d in doc.meta.active_days]


def render_week_rows(doc: "Document") -> list[list[str]]:
    """Gibt Tabellenzeilen für die Wochenansicht zurück.

    Jede Zeile: [Stunde, Standardzeit, <eine Spalte je aktivem Tag>]
    Von einem Verbund überdeckte Stunden werden als '↑' markiert, Filter-
    Treffer mit '★', leere Slots als '—'.
    """
    from models.queries import (
        cell_matches_filters,
        effective_time_range,
        format_time_range,
        get_cell,
        has_active_filters,
        has_cell_content,
        is_covered_by_merge,
        merge_span,
    )

    filtering = has_active_filters(doc.filters)
    rows: list[list[str]] = []

    for period in range(1, doc.meta.period_count + 1):
        cells = [str(period), format_time_range(doc.periods[period - 1])]
        for day in doc.meta.active_days:
            if is_covered_by_merge(doc, day, period):
                cells.append("↑")
                continue
            cell = get_cell(doc, day, period)
            if not has_cell_content(cell):
                cells.append("—")
                continue
            lines = [cell.subject or "(無題)"]
            if cell.teacher or cell.room:
                lines.append(" / ".join(p for p in (cell.teacher, cell.room) if p))
            span = merge_span(doc, day, period)
            if span > 1:
                lines.append(f"×{span}")
            time_range = effective_time_range(doc, day, period)
            if time_range != doc.periods[period - 1]:
                lines.append(format_time_range(time_range))
            if filtering and cell_matches_filters(cell, doc.filters):
                lines[0] = f"★ {lines[0]}"
            cells.append("\n".join(lines))
        rows.append(cells)

    return rows


def render_day_rows(doc: "Document", day: int) -> list[list[str]]:
    """Gibt Tabellenzeilen für die Tagesansicht zurück.

    Jede Zeile: [Stunde(n), Zeit, Dauer, Fach, Lehrkraft, Raum, Memo]
    """
    from models.queries import day_blocks

    rows: list[list[str]] = []
    for block in day_blocks(doc, day):
        if block.span > 1:
            label = f"{block.start_period}–{block.start_period + block.span - 1}"
        else:
            label = str(block.start_period)
        if block.empty:
            rows.append([label, block.time_label, f"{block.duration_minutes}分",
                         "—", "", "", ""])
            continue
        rows.append([
            label,
            block.time_label,
            f"{block.duration_minutes}分",
            block.cell.subject,
            block.cell.teacher,
            block.cell.room,
            block.cell.memo,
        ])
    return rows


def day_title(day: int) -> str:
    if 0 <= day < len(FULL_DAY_LABELS):
        return FULL_DAY_LABELS[day]
    return str(day)
