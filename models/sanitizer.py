"""Sanitizer: stellt alle Invarianten eines Stundenplan-Dokuments her.

Totale, reine Funktion. Jedes Feld wird unabhängig auf den nächsten gültigen
Wert repariert, das Dokument wird nie als Ganzes abgelehnt. Reparaturen
werden nur auf DEBUG-Ebene protokolliert, nie als Hinweis an den Nutzer.

Invarianten nach ``sanitize_document``:
- period_count ∈ [1, 8]
- active_days nicht leer, eindeutig, sortiert, jeweils ∈ [0, 6]
- jede gespeicherte Zeitspanne ist gültig (HH:MM, Beginn < Ende)
- Tages-Overrides existieren nur, wenn sie von der Standardzeit abweichen
- Verbünde eines Tages überlappen nicht und enden spätestens bei period_count
- jede Farbe ist "#RRGGBB" in Großbuchstaben
- alle Texte sind auf ihre Maximallänge gekürzt
- Zellen ohne Inhalt sind None
- ui.selected_day ist ein aktiver Tag
"""

import logging
from typing import Optional

from config.defaults import (
    DAY_COUNT,
    DEFAULT_ACTIVE_DAY,
    DEFAULT_TITLE,
    MAX_MEMO_LENGTH,
    MAX_PERIODS,
    MAX_TEXT_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_PERIODS,
)
from models.document import (
    Cell,
    Document,
    Filters,
    Meta,
    TabMode,
    TemplateKind,
    TimeRange,
    UiState,
)
from models.queries import has_cell_content, is_valid_time_range, normalize_hex_color
from models.timeslot import TimeSlot, empty_grid

logger = logging.getLogger(__name__)


# ─── Skalare ──────────────────────────────────────────────────────────────────

def _as_int(value: object) -> Optional[int]:
    """Ganzzahl oder None (bool zählt nicht als Zahl)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _clamp_text(value: object, limit: int) -> str:
    if not isinstance(value, str):
        return ""
    return value[:limit]


def _sanitize_period_count(value: object) -> int:
    count = _as_int(value)
    if count is None:
        logger.debug(f"Ungültige Stundenanzahl {value!r} → {MIN_PERIODS}")
        return MIN_PERIODS
    return max(MIN_PERIODS, min(MAX_PERIODS, count))


def _sanitize_active_days(days: object) -> list[int]:
    candidates = days if isinstance(days, (list, tuple, set)) else []
    valid = {d for d in map(_as_int, candidates) if d is not None and 0 <= d < DAY_COUNT}
    if not valid:
        logger.debug(f"Keine gültigen aktiven Tage in {days!r} → [{DEFAULT_ACTIVE_DAY}]")
        return [DEFAULT_ACTIVE_DAY]
    return sorted(valid)


def _sanitize_title(value: object) -> str:
    if not isinstance(value, str):
        return DEFAULT_TITLE
    title = value.strip()[:MAX_TITLE_LENGTH].rstrip()
    return title or DEFAULT_TITLE


def _sanitize_template(value: object) -> TemplateKind:
    try:
        return TemplateKind(value)
    except (TypeError, ValueError):
        logger.debug(f"Unbekanntes Template {value!r} → {TemplateKind.JUNIOR_HIGH.value}")
        return TemplateKind.JUNIOR_HIGH


# ─── Zeiten ───────────────────────────────────────────────────────────────────

def _clean_range(value: object) -> Optional[TimeRange]:
    """Gültige Zeitspanne oder None. Werte werden vorher auf 5 Zeichen gekürzt."""
    if not isinstance(value, TimeRange):
        return None
    candidate = TimeRange(
        start=_clamp_text(value.start, 5),
        end=_clamp_text(value.end, 5),
    )
    return candidate if is_valid_time_range(candidate) else None


def _sanitize_periods(periods: object) -> list[TimeRange]:
    source = periods if isinstance(periods, list) else []
    result: list[TimeRange] = []
    for index in range(MAX_PERIODS):
        cleaned = _clean_range(source[index]) if index < len(source) else None
        result.append(cleaned or TimeRange.default())
    return result


# ─── Zellen + Filter ──────────────────────────────────────────────────────────

def sanitize_cell(cell: Optional[Cell]) -> Cell:
    """Kürzt Texte und normalisiert die Farbe. None → kanonische leere Zelle."""
    if not isinstance(cell, Cell):
        return Cell()
    return Cell(
        subject=_clamp_text(cell.subject, MAX_TEXT_LENGTH),
        teacher=_clamp_text(cell.teacher, MAX_TEXT_LENGTH),
        room=_clamp_text(cell.room, MAX_TEXT_LENGTH),
        memo=_clamp_text(cell.memo, MAX_MEMO_LENGTH),
        color=normalize_hex_color(cell.color),
    )


def _sanitize_filters(filters: object) -> Filters:
    if not isinstance(filters, Filters):
        return Filters()
    color = _clamp_text(filters.color, MAX_TEXT_LENGTH)
    return Filters(
        query=_clamp_text(filters.query, MAX_TEXT_LENGTH),
        subject=_clamp_text(filters.subject, MAX_TEXT_LENGTH),
        teacher=_clamp_text(filters.teacher, MAX_TEXT_LENGTH),
        room=_clamp_text(filters.room, MAX_TEXT_LENGTH),
        color=normalize_hex_color(color) if color else "",
    )


# ─── Verbünde ─────────────────────────────────────────────────────────────────

def sanitize_day_merges(
    candidates: list[tuple[int, int]], period_count: int
) -> dict[int, int]:
    """Wählt überlappungsfreie Verbünde eines Tages aus.

    Kandidaten werden nach Startstunde aufsteigend verarbeitet. Die Spannweite
    wird auf period_count gekürzt; ein Kandidat, dessen Start in einem bereits
    akzeptierten Block liegt, wird verworfen (der zuerst akzeptierte gewinnt).

    Args:
        candidates: (Startstunde, Spannweite)-Paare in beliebiger Reihenfolge.
        period_count: Bereits geklemmte Stundenanzahl.

    Returns:
        {Startstunde: Spannweite} nur mit Spannweite >= 2.
    """
    accepted: dict[int, int] = {}
    last_covered = 0
    for start, span in sorted(candidates):
        if start < 1 or start > period_count:
            continue
        span = max(1, min(period_count - start + 1, span))
        if span < 2:
            continue
        if start <= last_covered:
            logger.debug(f"Verbund ab Stunde {start} überlappt → verworfen")
            continue
        accepted[start] = span
        last_covered = start + span - 1
    return accepted


# ─── Dokument ─────────────────────────────────────────────────────────────────

def sanitize_document(doc: Document) -> Document:
    """Gibt ein neues Dokument zurück, das alle Invarianten erfüllt.

    Das Eingabedokument wird nicht verändert. Die Funktion ist idempotent:
    ``sanitize_document(sanitize_document(x)) == sanitize_document(x)``.
    """
    meta = doc.meta if isinstance(doc.meta, Meta) else Meta()
    period_count = _sanitize_period_count(meta.period_count)
    active_days = _sanitize_active_days(meta.active_days)
    periods = _sanitize_periods(doc.periods)

    cells = empty_grid()
    overrides = empty_grid()
    merges = empty_grid()

    for day in range(DAY_COUNT):
        merge_candidates: list[tuple[int, int]] = []
        for period in range(1, period_count + 1):
            slot = TimeSlot(day, period)

            cell = sanitize_cell(slot.read(doc.cells))
            if has_cell_content(cell):
                slot.write(cells, cell)

            override = _clean_range(slot.read(doc.overrides))
            if override is not None and override != periods[period - 1]:
                slot.write(overrides, override)

            span = _as_int(slot.read(doc.merges))
            if span is not None:
                merge_candidates.append((period, span))

        for start, span in sanitize_day_merges(merge_candidates, period_count).items():
            TimeSlot(day, start).write(merges, span)

    ui = doc.ui if isinstance(doc.ui, UiState) else UiState()
    selected_day = _as_int(ui.selected_day)
    if selected_day not in active_days:
        selected_day = active_days[0]
    try:
        tab = TabMode(ui.tab)
    except (TypeError, ValueError):
        tab = TabMode.WEEK

    return Document(
        meta=Meta(
            title=_sanitize_title(meta.title),
            active_days=active_days,
            period_count=period_count,
            template=_sanitize_template(meta.template),
            share_filters=bool(meta.share_filters),
        ),
        periods=periods,
        overrides=overrides,
        cells=cells,
        merges=merges,
        filters=_sanitize_filters(doc.filters),
        ui=UiState(
            tab=tab,
            selected_day=selected_day,
            mobile_expanded_week=bool(ui.mobile_expanded_week),
            compact_week=ui.compact_week is not False,
            read_only=bool(ui.read_only),
            show_filters=bool(ui.show_filters),
        ),
    )


def share_ready(doc: Document) -> Document:
    """Sanitisiertes Dokument für das Teilen: Filter leer, wenn nicht geteilt."""
    clean = sanitize_document(doc)
    if not clean.meta.share_filters:
        clean = clean.model_copy(update={"filters": Filters()})
    return clean
