"""Kompakter Payload (Version 1): Dokument ↔ minimale JSON-Struktur.

Nur Abweichungen vom Template werden übertragen. Schlüssel sind kurze,
feste Token; Zeitspannen und Zellen sind Positions-Tupel, deren Reihenfolge
Teil des Link-Vertrags ist und sich nie ändern darf.

Struktur (vor der Kompression):

    m: { a: [Tag,...], p: Stundenanzahl, t: Template-ID, n?: Titel, sf?: 0|1 }
    p: [ [Beginn, Ende], ... ]                 8 Einträge, Stunden 1..8
    o?: { Tag: { Stunde: [Beginn, Ende] } }    nur abweichende Overrides
    c?: { Tag: { Stunde: [Fach, Lehrkraft, Raum, Memo, Farbe] } }
    g?: { Tag: { Stunde: Spannweite } }        nur Spannweite >= 2
    f?: { q?, s?, t?, r?, c? }                 nur wenn Filter geteilt werden
    u:  { t: w|d|s, d: Tag, mw, cp, ro, fp }   immer vorhanden

``c`` und ``g`` ersetzen, wenn vorhanden, die vorbelegten Zellen bzw.
Verbünde des Templates vollständig. Fehlen sie, gelten die Template-Werte.
"""

import json
import logging
import re
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from config.defaults import DAY_COUNT, DEFAULT_TITLE, MAX_PERIODS
from config.templates import create_from_template, get_template_by_id
from models.document import Cell, Document, Filters, TabMode, TimeRange
from models.queries import has_cell_content
from models.sanitizer import sanitize_document, share_ready
from models.timeslot import TimeSlot, empty_grid, iter_slots

logger = logging.getLogger(__name__)

TimePair = tuple[str, str]
CellTuple = tuple[str, str, str, str, str]

_TAB_TO_CODE = {TabMode.WEEK: "w", TabMode.DAY: "d", TabMode.SETTINGS: "s"}
_CODE_TO_TAB = {code: tab for tab, code in _TAB_TO_CODE.items()}

_ASTRAL = re.compile("[\U00010000-\U0010FFFF]")


class PayloadError(ValueError):
    """Payload ist kein gültiges JSON oder hat eine falsche Struktur."""


# ─── Wire-Modelle ─────────────────────────────────────────────────────────────

class MetaV1(BaseModel):
    a: Optional[list[int]] = None
    p: Optional[int] = None
    t: Optional[str] = None
    n: Optional[str] = None
    sf: Optional[int] = None


class FiltersV1(BaseModel):
    q: Optional[str] = None
    s: Optional[str] = None
    t: Optional[str] = None
    r: Optional[str] = None
    c: Optional[str] = None


class UiV1(BaseModel):
    t: Optional[str] = None
    d: Optional[int] = None
    mw: Optional[int] = None
    cp: Optional[int] = None
    ro: Optional[int] = None
    fp: Optional[int] = None


class PayloadV1(BaseModel):
    """Wire-Struktur Version 1. Alle Abschnitte außer ``m`` sind optional."""

    m: MetaV1 = Field(default_factory=MetaV1)
    p: Optional[list[Optional[TimePair]]] = None
    o: Optional[dict[str, dict[str, TimePair]]] = None
    c: Optional[dict[str, dict[str, CellTuple]]] = None
    g: Optional[dict[str, dict[str, int]]] = None
    f: Optional[FiltersV1] = None
    u: Optional[UiV1] = None


# ─── Encoder ──────────────────────────────────────────────────────────────────

def _nest(entries: dict[TimeSlot, object]) -> dict[str, dict[str, object]]:
    """{TimeSlot: Wert} → {"Tag": {"Stunde": Wert}}."""
    nested: dict[str, dict[str, object]] = {}
    for slot, value in entries.items():
        nested.setdefault(str(slot.day), {})[str(slot.period)] = value
    return nested


def encode_payload(doc: Document) -> PayloadV1:
    """Bildet ein Dokument auf den kompakten Payload ab.

    Das Dokument wird vorher teilbar gemacht (Filter leer, falls
    ``share_filters`` aus ist) und sanitisiert.
    """
    shared = share_ready(doc)
    meta = shared.meta
    template = get_template_by_id(meta.template)

    overrides: dict[TimeSlot, TimePair] = {}
    cells: dict[TimeSlot, CellTuple] = {}
    merges: dict[TimeSlot, int] = {}

    for slot in iter_slots(meta.period_count):
        override = slot.read(shared.overrides)
        if override is not None and override != shared.periods[slot.period - 1]:
            overrides[slot] = override.as_tuple()

        cell = slot.read(shared.cells)
        if has_cell_content(cell):
            cells[slot] = (cell.subject, cell.teacher, cell.room, cell.memo, cell.color)

        span = slot.read(shared.merges)
        if span is not None and span >= 2:
            merges[slot] = span

    payload = PayloadV1(
        m=MetaV1(
            a=list(meta.active_days),
            p=meta.period_count,
            t=meta.template.value,
            n=meta.title if meta.title != DEFAULT_TITLE else None,
            sf=None if meta.share_filters else 0,
        ),
        p=[period.as_tuple() for period in shared.periods[:MAX_PERIODS]],
        o=_nest(overrides) or None,
        c=_nest(cells) if cells or template.cells else None,
        g=_nest(merges) if merges or template.merges else None,
        u=UiV1(
            t=_TAB_TO_CODE[shared.ui.tab],
            d=shared.ui.selected_day,
            mw=int(shared.ui.mobile_expanded_week),
            cp=int(shared.ui.compact_week),
            ro=int(shared.ui.read_only),
            fp=int(shared.ui.show_filters),
        ),
    )

    filters = shared.filters
    if meta.share_filters:
        encoded = FiltersV1(
            q=filters.query or None,
            s=filters.subject or None,
            t=filters.teacher or None,
            r=filters.room or None,
            c=filters.color or None,
        )
        if encoded.model_dump(exclude_none=True):
            payload.f = encoded

    return payload


def payload_to_json(payload: PayloadV1) -> str:
    """Kompaktes JSON ohne Leerraum.

    Kana und Kanji bleiben roh; lz-string komprimiert sie als je ein UTF-16-Zeichen.
    Nur Zeichen außerhalb der BMP (Emoji) werden als Surrogat-Escape geschrieben,
    weil lzstring sie sonst nicht verlustfrei zurückliefert.
    """
    text = json.dumps(
        payload.model_dump(exclude_none=True),
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return _ASTRAL.sub(lambda m: json.dumps(m.group())[1:-1], text)


# ─── Decoder ──────────────────────────────────────────────────────────────────

def payload_from_json(text: str) -> PayloadV1:
    """Parst und validiert die Struktur. Fehler → PayloadError."""
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"Kein gültiges JSON: {e}") from e
    if not isinstance(raw, dict):
        raise PayloadError(f"Payload muss ein Objekt sein, nicht {type(raw).__name__}")
    try:
        return PayloadV1.model_validate(raw)
    except ValidationError as e:
        raise PayloadError(f"Ungültige Payload-Struktur: {e.error_count()} Fehler") from e


def _parse_index(text: str, low: int, high: int) -> Optional[int]:
    try:
        value = int(text)
    except ValueError:
        return None
    return value if low <= value <= high else None


def _iter_entries(section: dict[str, dict[str, object]]):
    """Liefert (TimeSlot, Wert); Schlüssel außerhalb des Rasters entfallen."""
    for day_text, by_period in section.items():
        day = _parse_index(day_text, 0, DAY_COUNT - 1)
        if day is None:
            continue
        for period_text, value in by_period.items():
            period = _parse_index(period_text, 1, MAX_PERIODS)
            if period is None:
                continue
            yield TimeSlot(day, period), value


def decode_payload(payload: PayloadV1) -> Document:
    """Baut das Standard-Dokument des Templates und überlagert den Payload.

    Fehlende Abschnitte behalten den Template-Wert. Das Ergebnis wird immer
    sanitisiert; nur über diesen Weg wird ein fremder Wert vertrauenswürdig.
    """
    m = payload.m
    template = get_template_by_id(m.t)
    doc = create_from_template(template.id)

    if m.a is not None:
        doc.meta.active_days = list(m.a)
    if m.p is not None:
        doc.meta.period_count = m.p
    if m.n is not None:
        doc.meta.title = m.n
    doc.meta.share_filters = m.sf != 0

    if payload.p is not None:
        for index, entry in enumerate(payload.p[:MAX_PERIODS]):
            if entry is not None:
                doc.periods[index] = TimeRange(start=entry[0], end=entry[1])

    if payload.o is not None:
        for slot, (start, end) in _iter_entries(payload.o):
            slot.write(doc.overrides, TimeRange(start=start, end=end))

    if payload.c is not None:
        doc.cells = empty_grid()
        for slot, values in _iter_entries(payload.c):
            subject, teacher, room, memo, color = values
            slot.write(doc.cells, Cell(subject=subject, teacher=teacher, room=room,
                                       memo=memo, color=color))

    if payload.g is not None:
        doc.merges = empty_grid()
        for slot, span in _iter_entries(payload.g):
            slot.write(doc.merges, span)

    if payload.f is not None:
        f = payload.f
        doc.filters = Filters(
            query=f.q or "",
            subject=f.s or "",
            teacher=f.t or "",
            room=f.r or "",
            color=f.c or "",
        )

    if payload.u is not None:
        u = payload.u
        doc.ui.tab = _CODE_TO_TAB.get(u.t, TabMode.WEEK)
        if u.d is not None:
            doc.ui.selected_day = u.d
        doc.ui.mobile_expanded_week = u.mw == 1
        doc.ui.compact_week = u.cp != 0
        doc.ui.read_only = u.ro == 1
        doc.ui.show_filters = u.fp != 0

    return sanitize_document(doc)


# ─── Komfort ──────────────────────────────────────────────────────────────────

def dump_document(doc: Document) -> str:
    """Dokument → kompaktes Payload-JSON (vor der Kompression)."""
    return payload_to_json(encode_payload(doc))


def load_document(text: str) -> Document:
    """Payload-JSON → sanitisiertes Dokument. Strukturfehler → PayloadError."""
    return decode_payload(payload_from_json(text))
