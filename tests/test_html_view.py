"""Unit tests for HTML table output."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from json_table_viewer.formatting import format_cell
from json_table_viewer.html_view import cell_html, highlight, plan_to_html
from json_table_viewer.inference import infer
from json_table_viewer.renderer import SortState, render

DATA = [
    {"name": "Alice", "age": 30, "profile": {"city": "Seoul"}},
    {"name": "<script>", "age": 25},
]


class TestHighlight:

    def test_marks_case_insensitive_matches(self):
        assert highlight("Alice", "ali") == "<mark>Ali</mark>ce"

    def test_escapes_text(self):
        assert highlight("<b>", "") == "&lt;b&gt;"

    def test_regex_characters_are_literal(self):
        assert highlight("a.b", ".") == "a<mark>.</mark>b"


class TestCellHtml:

    def test_nested_cell_uses_details(self):
        out = cell_html(format_cell({"city": "Seoul"}))
        assert out.startswith("<details><summary>{1 properties}</summary>")
        assert "<th>Key</th>" in out
        assert "Seoul" in out

    def test_null_cell(self):
        assert 'class="jtv-null"' in cell_html(format_cell(None))


class TestPlanToHtml:

    def test_no_plan(self):
        assert "No data loaded." in plan_to_html(None)
        assert "&lt;bad&gt;" in plan_to_html(None, "<bad>")

    def test_empty_table(self):
        assert "no rows" in plan_to_html(render(infer([])))

    def test_no_results(self):
        out = plan_to_html(render(infer(DATA), search_term="zzz"))
        assert 'No results found for "zzz"' in out

    def test_table_markup(self):
        plan = render(infer(DATA), container_width=1200, sort=SortState("age", "desc"))
        out = plan_to_html(plan)
        assert 'aria-sort="descending"' in out
        assert 'class="sortable sort-desc"' in out
        assert "&lt;script&gt;" in out
        assert "<script>" not in out
        assert f'width:{plan.widths["name"]}px' in out
        assert '<td data-numeric="true">30</td>' in out

    def test_search_highlight(self):
        out = plan_to_html(render(infer(DATA), search_term="ali"))
        assert "<mark>Ali</mark>ce" in out
        assert 'data-row-index="0"' in out
