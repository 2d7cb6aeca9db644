"""Lesende Hilfsfunktionen auf einem Stundenplan-Dokument.

Zeit- und Farbprüfung, effektive Zeiten pro Tag, Block-Zerlegung eines Tages
(Verbünde) und Filter-Abgleich. Keine Funktion hier verändert das Dokument.
"""

import re
from dataclasses import dataclass
from typing import Optional

from config.defaults import DAY_INDEXES, DEFAULT_CELL_COLOR, MAX_PERIODS
from models.document import Cell, Document, Filters, TimeRange
from models.timeslot import TimeSlot

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


# ─── Zeiten ───────────────────────────────────────────────────────────────────

def is_valid_time(value: object) -> bool:
    """True für "HH:MM" zwischen 00:00 und 23:59."""
    return isinstance(value, str) and _TIME_RE.match(value) is not None


def parse_time_to_minutes(value: str) -> Optional[int]:
    """ "08:45" → 525. Ungültig → None."""
    if not is_valid_time(value):
        return None
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def is_valid_time_range(time_range: Optional[TimeRange]) -> bool:
    """Beide Zeiten gültig und Beginn strikt vor Ende."""
    if time_range is None:
        return False
    start = parse_time_to_minutes(time_range.start)
    end = parse_time_to_minutes(time_range.end)
    return start is not None and end is not None and start < end


def format_time_range(time_range: TimeRange) -> str:
    return f"{time_range.start} - {time_range.end}"


def duration_minutes(time_range: TimeRange) -> int:
    """Dauer in Minuten, 0 bei ungültiger Spanne."""
    if not is_valid_time_range(time_range):
        return 0
    return parse_time_to_minutes(time_range.end) - parse_time_to_minutes(time_range.start)


# ─── Farben ───────────────────────────────────────────────────────────────────

def is_valid_hex_color(value: object) -> bool:
    return isinstance(value, str) and _HEX_COLOR_RE.match(value) is not None


def normalize_hex_color(value: object) -> str:
    """Normalisiert auf "#RRGGBB" in Großbuchstaben.

    "#" ist bei der Eingabe optional. Alles andere → DEFAULT_CELL_COLOR.
    """
    if not isinstance(value, str):
        return DEFAULT_CELL_COLOR
    candidate = value.strip()
    if not candidate.startswith("#"):
        candidate = f"#{candidate}"
    if is_valid_hex_color(candidate):
        return candidate.upper()
    return DEFAULT_CELL_COLOR


def accessible_text_color(background: str) -> str:
    """Schwarz oder Weiß, je nach relativer Helligkeit des Hintergrunds."""
    h = normalize_hex_color(background).lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    luminance = (0.2126 * r + 0.7152 * g + 0.0722 * b) / 255
    return "#111111" if luminance > 0.55 else "#FFFFFF"


# ─── Zellen ───────────────────────────────────────────────────────────────────

def has_cell_content(cell: Optional[Cell]) -> bool:
    """Eine Zelle hat Inhalt, wenn ein Textfeld nicht leer ist oder die
    Farbe vom Sentinel abweicht."""
    if cell is None:
        return False
    return bool(
        cell.subject.strip()
        or cell.teacher.strip()
        or cell.room.strip()
        or cell.memo.strip()
        or normalize_hex_color(cell.color) != DEFAULT_CELL_COLOR
    )


def get_cell(doc: Document, day: int, period: int) -> Cell:
    """Zelle am Slot; fehlende Zellen liefern die kanonische leere Zelle."""
    cell = TimeSlot(day, period).read(doc.cells)
    return cell.model_copy() if cell is not None else Cell()


def effective_time_range(doc: Document, day: int, period: int) -> TimeRange:
    """Tages-Override > Standardzeit der Stunde > 09:00–09:50."""
    override = TimeSlot(day, period).read(doc.overrides)
    if is_valid_time_range(override):
        return override
    if 1 <= period <= min(MAX_PERIODS, len(doc.periods)):
        default = doc.periods[period - 1]
        if is_valid_time_range(default):
            return default
    return TimeRange.default()


# ─── Verbünde ─────────────────────────────────────────────────────────────────

def merge_span(doc: Document, day: int, period: int) -> int:
    """Spannweite des Blocks, der bei ``period`` beginnt (1 = kein Verbund)."""
    raw = TimeSlot(day, period).read(doc.merges)
    if not raw or raw < 2:
        return 1
    max_span = max(1, doc.meta.period_count - period + 1)
    return min(raw, max_span)


def is_covered_by_merge(doc: Document, day: int, period: int) -> bool:
    """True wenn ``period`` innerhalb (nicht am Anfang) eines Blocks liegt."""
    for start in range(1, period):
        span = merge_span(doc, day, start)
        if span > 1 and start + span - 1 >= period:
            return True
    return False


@dataclass
class DayBlock:
    """Ein sichtbarer Block der Tagesansicht (einzelne Stunde oder Verbund)."""

    day: int
    start_period: int
    span: int
    cell: Cell
    duration_minutes: int
    time_label: str
    empty: bool

    @property
    def key(self) -> str:
        return f"{self.day}-{self.start_period}"


def day_blocks(doc: Document, day: int) -> list[DayBlock]:
    """Zerlegt einen Tag in Blöcke; von Verbünden überdeckte Stunden entfallen."""
    blocks: list[DayBlock] = []
    for period in range(1, doc.meta.period_count + 1):
        if is_covered_by_merge(doc, day, period):
            continue
        span = merge_span(doc, day, period)
        cell = get_cell(doc, day, period)
        total = sum(
            duration_minutes(effective_time_range(doc, day, period + offset))
            for offset in range(span)
        )
        first = effective_time_range(doc, day, period)
        last = effective_time_range(doc, day, period + span - 1)
        blocks.append(DayBlock(
            day=day,
            start_period=period,
            span=span,
            cell=cell.model_copy(update={"color": normalize_hex_color(cell.color)}),
            duration_minutes=total,
            time_label=f"{first.start} - {last.end}",
            empty=not has_cell_content(cell),
        ))
    return blocks


# ─── Filter ───────────────────────────────────────────────────────────────────

def has_active_filters(filters: Filters) -> bool:
    return bool(
        filters.query.strip()
        or filters.subject.strip()
        or filters.teacher.strip()
        or filters.room.strip()
        or filters.color.strip()
    )


def _contains(source: str, keyword: str) -> bool:
    if not keyword:
        return True
    return keyword.lower() in source.lower()


def cell_matches_filters(cell: Optional[Cell], filters: Filters) -> bool:
    """Prüft eine Zelle gegen alle gesetzten Filter (Teilstring, ohne Groß/Klein)."""
    if not has_active_filters(filters):
        return True
    if not has_cell_content(cell):
        return False

    query = filters.query.strip()
    searchable = f"{cell.subject} {cell.teacher} {cell.room}"
    if query and not _contains(searchable, query):
        return False
    if not _contains(cell.subject, filters.subject.strip()):
        return False
    if not _contains(cell.teacher, filters.teacher.strip()):
        return False
    if not _contains(cell.room, filters.room.strip()):
        return False

    color = filters.color.strip()
    if color and normalize_hex_color(cell.color) != normalize_hex_color(color):
        return False
    return True


@dataclass
class FilterOptions:
    """Auswahllisten für die Filter-Eingaben."""

    subjects: list[str]
    teachers: list[str]
    rooms: list[str]
    colors: list[str]


def collect_filter_options(doc: Document) -> FilterOptions:
    """Sammelt alle vorkommenden Fächer, Lehrkräfte, Räume und Farben."""
    subjects: set[str] = set()
    teachers: set[str] = set()
    rooms: set[str] = set()
    colors: set[str] = set()

    for day in DAY_INDEXES:
        for period in range(1, MAX_PERIODS + 1):
            cell = TimeSlot(day, period).read(doc.cells)
            if not has_cell_content(cell):
                continue
            if cell.subject.strip():
                subjects.add(cell.subject.strip())
            if cell.teacher.strip():
                teachers.add(cell.teacher.strip())
            if cell.room.strip():
                rooms.add(cell.room.strip())
            colors.add(normalize_hex_color(cell.color))

    return FilterOptions(
        subjects=sorted(subjects),
        teachers=sorted(teachers),
        rooms=sorted(rooms),
        colors=sorted(colors),
    )
