"""Diskrete Änderungsoperationen auf einem Stundenplan-Dokument.

Jede Operation arbeitet auf einer Kopie, sanitisiert das Ergebnis und gibt ein
neues Dokument zurück. Das Eingabedokument bleibt unverändert.
"""

from config.templates import create_from_template
from models.document import Cell, Document, Filters, TimeRange, UiState
from models.queries import get_cell
from models.sanitizer import sanitize_document
from models.timeslot import TimeSlot


def set_title(doc: Document, title: str) -> Document:
    updated = doc.clone()
    updated.meta.title = title
    return sanitize_document(updated)


def apply_template(doc: Document, template_id: object) -> Document:
    """Wendet ein Template neu an. Zellen, Zeiten und Verbünde werden ersetzt;
    UI-Zustand, Filter und das share_filters-Flag bleiben erhalten."""
    fresh = create_from_template(template_id, keep_ui=True, keep_filters=True, previous=doc)
    return sanitize_document(fresh)


def reset(doc: Document) -> Document:
    """Setzt auf den Standard des aktuellen Templates zurück."""
    return sanitize_document(create_from_template(doc.meta.template))


def set_active_days(doc: Document, days: list[int]) -> Document:
    updated = doc.clone()
    updated.meta.active_days = list(days)
    return sanitize_document(updated)


def set_period_count(doc: Document, count: int) -> Document:
    updated = doc.clone()
    updated.meta.period_count = count
    return sanitize_document(updated)


def set_period_time(doc: Document, period: int, start: str, end: str) -> Document:
    """Setzt die Standardzeit einer Stunde (ungültig → 09:00–09:50)."""
    updated = doc.clone()
    if 1 <= period <= len(updated.periods):
        updated.periods[period - 1] = TimeRange(start=start, end=end)
    return sanitize_document(updated)


def set_cell(doc: Document, day: int, period: int, **fields: str) -> Document:
    """Ändert einzelne Felder einer Zelle (subject, teacher, room, memo, color).

    Nicht genannte Felder behalten ihren Wert; eine fehlende Zelle startet als
    leere Zelle.
    """
    unknown = set(fields) - set(Cell.model_fields)
    if unknown:
        raise ValueError(f"Unbekannte Zellfelder: {sorted(unknown)}")
    updated = doc.clone()
    cell = get_cell(updated, day, period).model_copy(update=fields)
    TimeSlot(day, period).write(updated.cells, cell)
    return sanitize_document(updated)


def clear_cell(doc: Document, day: int, period: int) -> Document:
    updated = doc.clone()
    TimeSlot(day, period).write(updated.cells, None)
    return sanitize_document(updated)


def set_override(doc: Document, day: int, period: int, start: str, end: str) -> Document:
    """Tagesabweichende Zeit. Ungültig oder gleich der Standardzeit → entfällt."""
    updated = doc.clone()
    TimeSlot(day, period).write(updated.overrides, TimeRange(start=start, end=end))
    return sanitize_document(updated)


def clear_override(doc: Document, day: int, period: int) -> Document:
    updated = doc.clone()
    TimeSlot(day, period).write(updated.overrides, None)
    return sanitize_document(updated)


def set_merge_span(doc: Document, day: int, start_period: int, span: int) -> Document:
    """Setzt die Spannweite eines Verbunds ab ``start_period``.

    Überlappende Verbünde desselben Tages werden entfernt. Bei Spannweite >= 2
    wird der Inhalt der Startzelle einmalig in die überdeckten Stunden kopiert;
    spätere Änderungen der Startzelle synchronisiert der Aufrufer selbst.
    Spannweite 1 hebt den Verbund auf.
    Liegt ``start_period`` außerhalb von 1..period_count, bleibt das Dokument
    unverändert.
    """
    updated = doc.clone()
    period_count = updated.meta.period_count
    if not TimeSlot(day, start_period).in_grid or start_period > period_count:
        return sanitize_document(updated)
    span = min(max(1, span), period_count - start_period + 1)
    target_end = start_period + span - 1

    for other in range(1, period_count + 1):
        slot = TimeSlot(day, other)
        other_span = slot.read(updated.merges)
        if other_span is None:
            continue
        other_end = other + max(1, other_span) - 1
        if not (target_end < other or other_end < start_period):
            slot.write(updated.merges, None)

    if span >= 2:
        TimeSlot(day, start_period).write(updated.merges, span)
        start_cell = get_cell(updated, day, start_period)
        for period in range(start_period + 1, target_end + 1):
            TimeSlot(day, period).write(updated.cells, start_cell.model_copy())

    return sanitize_document(updated)


def set_filters(doc: Document, **fields: str) -> Document:
    """Ändert einzelne Filterfelder (query, subject, teacher, room, color)."""
    unknown = set(fields) - set(Filters.model_fields)
    if unknown:
        raise ValueError(f"Unbekannte Filterfelder: {sorted(unknown)}")
    updated = doc.clone()
    updated.filters = updated.filters.model_copy(update=fields)
    return sanitize_document(updated)


def clear_filters(doc: Document) -> Document:
    updated = doc.clone()
    updated.filters = Filters()
    return sanitize_document(updated)


def set_share_filters(doc: Document, enabled: bool) -> Document:
    updated = doc.clone()
    updated.meta.share_filters = enabled
    return sanitize_document(updated)


def set_ui(doc: Document, **fields: object) -> Document:
    """Ändert UI-Felder (tab, selected_day, compact_week, read_only, ...)."""
    updated = doc.clone()
    unknown = set(fields) - set(UiState.model_fields)
    if unknown:
        raise ValueError(f"Unbekannte UI-Felder: {sorted(unknown)}")
    updated.ui = updated.ui.model_copy(update=fields)
    return sanitize_document(updated)

