"""Stundenplan-Dokument: vollständiger, über einen Link teilbarer Zustand (Pydantic v2).

Die Modelle selbst erzwingen KEINE Wertebereiche. Ein Dokument aus einem
fremden Link darf zunächst beliebige Werte enthalten; erst
``models.sanitizer.sanitize_document`` stellt alle Invarianten her.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from config.defaults import (
    DEFAULT_CELL_COLOR,
    DEFAULT_PERIOD_END,
    DEFAULT_PERIOD_START,
    DEFAULT_TITLE,
)
from models.timeslot import empty_grid


class TemplateKind(str, Enum):
    ELEMENTARY = "elementary"
    JUNIOR_HIGH = "junior-high"
    HIGH_SCHOOL = "high-school"
    UNIVERSITY = "university"
    CUSTOM = "custom"


class TabMode(str, Enum):
    WEEK = "week"
    DAY = "day"
    SETTINGS = "settings"


class TimeRange(BaseModel):
    """Zeitspanne einer Stunde im Format "HH:MM" (24 h)."""

    start: str
    end: str

    @classmethod
    def default(cls) -> "TimeRange":
        """Eingebauter Rückfallwert 09:00–09:50."""
        return cls(start=DEFAULT_PERIOD_START, end=DEFAULT_PERIOD_END)

    def as_tuple(self) -> tuple[str, str]:
        return (self.start, self.end)


class Cell(BaseModel):
    """Inhalt eines Slots. Feldreihenfolge = Tupel-Reihenfolge im Link!"""

    subject: str = ""
    teacher: str = ""
    room: str = ""
    memo: str = ""
    color: str = DEFAULT_CELL_COLOR


class Meta(BaseModel):
    """Kopfdaten des Dokuments."""

    title: str = DEFAULT_TITLE
    # Wochentage 0=So .. 6=Sa, sortiert und eindeutig
    active_days: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    # Anzahl Stunden pro Tag (1..8)
    period_count: int = 6
    template: TemplateKind = TemplateKind.JUNIOR_HIGH
    # Filter beim Teilen mitschicken?
    share_filters: bool = True


class Filters(BaseModel):
    """Such- und Filterkriterien (flüchtig, optional teilbar)."""

    query: str = ""
    subject: str = ""
    teacher: str = ""
    room: str = ""
    color: str = ""


class UiState(BaseModel):
    """Ansichtszustand. Wird immer geteilt, damit ein Link dieselbe Ansicht zeigt."""

    tab: TabMode = TabMode.WEEK
    selected_day: int = 1
    mobile_expanded_week: bool = False
    compact_week: bool = True
    read_only: bool = False
    show_filters: bool = True


def _default_periods() -> list[TimeRange]:
    return [TimeRange.default() for _ in range(8)]


class Document(BaseModel):
    """Vollständiger Stundenplan-Zustand (Aggregat-Wurzel).

    Raster sind feste 7 × 8 Listen, adressiert als ``grid[day][period - 1]``.
    ``None`` bedeutet "nicht gesetzt" (→ Standardwert).
    """

    meta: Meta = Field(default_factory=Meta)
    # Standardzeiten der Stunden 1..8 (Index = Stunde - 1)
    periods: list[TimeRange] = Field(default_factory=_default_periods)
    overrides: list[list[Optional[TimeRange]]] = Field(default_factory=empty_grid)
    cells: list[list[Optional[Cell]]] = Field(default_factory=empty_grid)
    merges: list[list[Optional[int]]] = Field(default_factory=empty_grid)
    filters: Filters = Field(default_factory=Filters)
    ui: UiState = Field(default_factory=UiState)

    def clone(self) -> "Document":
        """Unabhängige Kopie (Teilen erzeugt einen Schnappschuss, keine Referenz)."""
        return self.model_copy(deep=True)


class DecodeResult(BaseModel):
    """Ergebnis eines Link-Decodes: immer ein gültiges Dokument, optional ein Hinweis."""

    document: Document
    advisory: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.advisory is None
