"""Tests für die Template-Bibliothek."""

import pytest

from config.defaults import DEFAULT_TITLE, FALLBACK_PERIOD_TIMES
from config.templates import (
    TEMPLATES,
    create_from_template,
    default_periods,
    get_template_by_id,
)
from models.document import Filters, TemplateKind, TimeRange, UiState
from models.queries import has_cell_content
from models.sanitizer import sanitize_document


class TestTemplateLibrary:
    def test_all_kinds_present(self):
        assert {t.id for t in TEMPLATES} == set(TemplateKind)

    @pytest.mark.parametrize("template", TEMPLATES, ids=lambda t: t.id.value)
    def test_template_cells_inside_grid(self, template):
        """Vorbelegte Zellen liegen auf aktiven Tagen innerhalb der Stundenanzahl."""
        for entry in template.cells:
            assert entry.day in template.active_days
            assert 1 <= entry.period <= template.period_count

    @pytest.mark.parametrize("template", TEMPLATES, ids=lambda t: t.id.value)
    def test_template_is_already_sanitized(self, template):
        doc = create_from_template(template.id)
        assert sanitize_document(doc) == doc

    def test_lookup_by_string(self):
        assert get_template_by_id("university").id == TemplateKind.UNIVERSITY

    def test_lookup_by_enum(self):
        assert get_template_by_id(TemplateKind.HIGH_SCHOOL).id == TemplateKind.HIGH_SCHOOL

    @pytest.mark.parametrize("unknown", ["kindergarten", None, 42, ""])
    def test_unknown_id_falls_back_to_junior_high(self, unknown):
        assert get_template_by_id(unknown).id == TemplateKind.JUNIOR_HIGH

    def test_university_has_two_merges(self):
        template = get_template_by_id("university")
        assert [(m.day, m.start, m.span) for m in template.merges] == [(2, 2, 2), (4, 4, 2)]

    def test_custom_is_empty(self):
        template = get_template_by_id("custom")
        assert template.cells == []
        assert template.active_days == [0, 1, 2, 3, 4, 5, 6]
        assert template.period_count == 8


class TestDefaultPeriods:
    def test_always_eight_periods(self):
        for template in TEMPLATES:
            assert len(default_periods(template)) == 8

    def test_missing_periods_use_fallback(self):
        """Grundschule definiert 6 Stunden; 7 und 8 kommen aus dem Rückfallraster."""
        periods = default_periods(get_template_by_id("elementary"))
        assert periods[0] == TimeRange(start="08:35", end="09:20")
        assert periods[6].as_tuple() == FALLBACK_PERIOD_TIMES[7]
        assert periods[7].as_tuple() == FALLBACK_PERIOD_TIMES[8]

    def test_no_template_uses_fallback(self):
        periods = default_periods()
        assert [p.as_tuple() for p in periods] == [FALLBACK_PERIOD_TIMES[p] for p in range(1, 9)]


class TestCreateFromTemplate:
    def test_fresh_document(self):
        doc = create_from_template("elementary")
        assert doc.meta.title == DEFAULT_TITLE
        assert doc.meta.template == TemplateKind.ELEMENTARY
        assert doc.meta.period_count == 6
        assert doc.meta.share_filters is True
        assert doc.ui.selected_day == 1
        assert has_cell_content(doc.cells[1][0])
        assert doc.cells[1][0].subject == "国語"

    def test_university_merges_applied(self):
        doc = create_from_template("university")
        assert doc.merges[2][1] == 2
        assert doc.merges[4][3] == 2

    def test_custom_selects_sunday(self):
        assert create_from_template("custom").ui.selected_day == 0

    def test_keep_ui_resets_inactive_day(self):
        previous = create_from_template("junior-high")
        previous.ui = UiState(selected_day=6, read_only=True)
        doc = create_from_template("university", keep_ui=True, previous=previous)
        assert doc.ui.read_only is True
        assert doc.ui.selected_day == 1

    def test_keep_filters(self):
        previous = create_from_template("junior-high")
        previous.filters = Filters(subject="数学")
        kept = create_from_template("university", keep_filters=True, previous=previous)
        dropped = create_from_template("university", previous=previous)
        assert kept.filters.subject == "数学"
        assert dropped.filters == Filters()

    def test_share_filters_flag_taken_from_previous(self):
        previous = create_from_template("junior-high")
        previous.meta.share_filters = False
        assert create_from_template("custom", previous=previous).meta.share_filters is False

    def test_documents_are_independent(self):
        a = create_from_template("university")
        b = create_from_template("university")
        a.cells[1][0].subject = "geändert"
        assert b.cells[1][0].subject == "線形代数"
