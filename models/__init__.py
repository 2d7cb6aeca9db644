from models.timeslot import TimeSlot
from models.document import (
    Cell,
    DecodeResult,
    Document,
    Filters,
    Meta,
    TabMode,
    TemplateKind,
    TimeRange,
    UiState,
)
from models.sanitizer import sanitize_document

sanitize = sanitize_document

__all__ = [
    "TimeSlot",
    "Cell",
    "DecodeResult",
    "Document",
    "Filters",
    "Meta",
    "TabMode",
    "TemplateKind",
    "TimeRange",
    "UiState",
    "sanitize_document",
    "sanitize",
]
