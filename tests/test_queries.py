"""Tests für lesende Hilfsfunktionen (Zeiten, Farben, Blöcke, Filter)."""

import pytest

from config.defaults import DEFAULT_CELL_COLOR
from config.templates import create_from_template
from models.document import Cell, Filters, TimeRange
from models.queries import (
    accessible_text_color,
    cell_matches_filters,
    collect_filter_options,
    day_blocks,
    duration_minutes,
    effective_time_range,
    get_cell,
    has_active_filters,
    has_cell_content,
    is_covered_by_merge,
    is_valid_time,
    is_valid_time_range,
    merge_span,
    normalize_hex_color,
    parse_time_to_minutes,
)


# ─── ZEITEN ───────────────────────────────────────────────────────────────────

class TestTimes:
    @pytest.mark.parametrize("value", ["00:00", "08:45", "23:59"])
    def test_valid_times(self, value):
        assert is_valid_time(value)

    @pytest.mark.parametrize("value", ["24:00", "8:45", "08:60", "0845", "", None, 845])
    def test_invalid_times(self, value):
        assert not is_valid_time(value)

    def test_parse_minutes(self):
        assert parse_time_to_minutes("08:45") == 525
        assert parse_time_to_minutes("kaputt") is None

    def test_range_requires_start_before_end(self):
        assert is_valid_time_range(TimeRange(start="08:00", end="08:50"))
        assert not is_valid_time_range(TimeRange(start="08:50", end="08:50"))
        assert not is_valid_time_range(None)

    def test_duration(self):
        assert duration_minutes(TimeRange(start="09:00", end="10:30")) == 90
        assert duration_minutes(TimeRange(start="10:30", end="09:00")) == 0


# ─── FARBEN ───────────────────────────────────────────────────────────────────

class TestColors:
    @pytest.mark.parametrize("value, expected", [
        ("#abcdef", "#ABCDEF"),
        ("abcdef", "#ABCDEF"),
        (" #12ab34 ", "#12AB34"),
        ("#abc", DEFAULT_CELL_COLOR),
        ("rot", DEFAULT_CELL_COLOR),
        (None, DEFAULT_CELL_COLOR),
    ])
    def test_normalize(self, value, expected):
        assert normalize_hex_color(value) == expected

    def test_text_color_contrast(self):
        assert accessible_text_color("#FFFFFF") == "#111111"
        assert accessible_text_color("#000000") == "#FFFFFF"


# ─── ZELLEN + VERBÜNDE ────────────────────────────────────────────────────────

class TestCellsAndMerges:
    def test_empty_cell_has_no_content(self):
        assert not has_cell_content(None)
        assert not has_cell_content(Cell())
        assert not has_cell_content(Cell(subject="   "))

    def test_color_alone_is_content(self):
        assert has_cell_content(Cell(color="#123456"))

    def test_get_cell_missing_returns_empty(self):
        doc = create_from_template("custom")
        assert get_cell(doc, 3, 3) == Cell()

    def test_effective_time_prefers_override(self):
        doc = create_from_template("university")
        doc.overrides[1][0] = TimeRange(start="08:45", end="10:15")
        assert effective_time_range(doc, 1, 1) == TimeRange(start="08:45", end="10:15")
        assert effective_time_range(doc, 2, 1) == TimeRange(start="09:00", end="10:30")

    def test_merge_span_and_coverage(self):
        doc = create_from_template("university")
        assert merge_span(doc, 2, 2) == 2
        assert merge_span(doc, 2, 1) == 1
        assert is_covered_by_merge(doc, 2, 3)
        assert not is_covered_by_merge(doc, 2, 2)
        assert not is_covered_by_merge(doc, 2, 4)


class TestDayBlocks:
    def test_merged_block_combines_periods(self):
        """Dienstag der Uni-Vorlage: Stunden 2+3 bilden einen 180-Minuten-Block."""
        blocks = day_blocks(create_from_template("university"), 2)
        assert [b.start_period for b in blocks] == [1, 2, 4, 5, 6]
        merged = blocks[1]
        assert merged.span == 2
        assert merged.duration_minutes == 180
        assert merged.time_label == "10:40 - 14:30"
        assert merged.cell.subject == "微分積分学"
        assert merged.key == "2-2"

    def test_empty_blocks_flagged(self):
        blocks = day_blocks(create_from_template("university"), 2)
        assert blocks[0].empty
        assert not blocks[1].empty


# ─── FILTER ───────────────────────────────────────────────────────────────────

class TestFilters:
    def test_no_filters_match_everything(self):
        assert not has_active_filters(Filters())
        assert cell_matches_filters(None, Filters())

    def test_query_searches_subject_teacher_room(self):
        cell = Cell(subject="線形代数", teacher="佐藤教授", room="A101")
        assert cell_matches_filters(cell, Filters(query="佐藤"))
        assert cell_matches_filters(cell, Filters(query="a101"))
        assert not cell_matches_filters(cell, Filters(query="鈴木"))

    def test_all_fields_must_match(self):
        cell = Cell(subject="英語", teacher="Smith先生", room="LL教室", color="#8D74E8")
        assert cell_matches_filters(cell, Filters(subject="英", color="#8d74e8"))
        assert not cell_matches_filters(cell, Filters(subject="英", color="#000000"))

    def test_empty_cell_never_matches_active_filter(self):
        assert not cell_matches_filters(Cell(), Filters(subject="数学"))

    def test_collect_options(self):
        options = collect_filter_options(create_from_template("university"))
        assert "ゼミ" in options.subjects
        assert "佐藤教授" in options.teachers
        assert "PC-1" in options.rooms
        assert options.subjects == sorted(options.subjects)
