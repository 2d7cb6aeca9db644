"""Datenmodell für einen Slot (Tag × Stunde) im Wochenraster."""

from dataclasses import dataclass
from typing import Iterator, Optional, TypeVar

from config.defaults import DAY_COUNT, DAY_LABELS, MAX_PERIODS

T = TypeVar("T")


@dataclass(frozen=True)
class TimeSlot:
    """Repräsentiert eine Zelle im 7 × 8 Wochenraster.

    Kombination aus Wochentag und Stunde.
    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    Rasterlisten werden als ``grid[day][period - 1]`` adressiert.
    """

    # Wochentag (0=Sonntag, 1=Montag, ..., 6=Samstag)
    day: int
    # Stunde (1-basiert, z.B. 1 = 1. Stunde)
    period: int

    @property
    def slot_id(self) -> str:
        """Eindeutiger String-Bezeichner (z.B. "1_1" für Mo 1. Stunde)."""
        return f"{self.day}_{self.period}"

    @property
    def day_name(self) -> str:
        """Abgekürzter Tagesname."""
        if 0 <= self.day < len(DAY_LABELS):
            return DAY_LABELS[self.day]
        return str(self.day)

    @property
    def in_grid(self) -> bool:
        """True wenn der Slot innerhalb des festen 7 × 8 Rasters liegt."""
        return 0 <= self.day < DAY_COUNT and 1 <= self.period <= MAX_PERIODS

    def read(self, grid: list[list[Optional[T]]]) -> Optional[T]:
        """Liest den Slot aus einem Raster; außerhalb oder zu kurz → None."""
        if not self.in_grid or not isinstance(grid, list) or self.day >= len(grid):
            return None
        row = grid[self.day]
        if not isinstance(row, list) or self.period - 1 >= len(row):
            return None
        return row[self.period - 1]

    def write(self, grid: list[list[Optional[T]]], value: Optional[T]) -> None:
        """Schreibt in ein vollständiges 7 × 8 Raster (außerhalb: ignoriert)."""
        if self.in_grid:
            grid[self.day][self.period - 1] = value

    def __repr__(self) -> str:
        return f"TimeSlot({self.day_name}, {self.period}限)"

    def __str__(self) -> str:
        return f"{self.day_name} {self.period}限"


def iter_slots(period_count: int = MAX_PERIODS) -> Iterator[TimeSlot]:
    """Alle Slots Tag für Tag, jeweils Stunden 1..period_count."""
    for day in range(DAY_COUNT):
        for period in range(1, period_count + 1):
            yield TimeSlot(day, period)


def empty_grid() -> list[list[None]]:
    """Neues leeres 7 × 8 Raster (alle Slots abwesend)."""
    return [[None] * MAX_PERIODS for _ in range(DAY_COUNT)]
