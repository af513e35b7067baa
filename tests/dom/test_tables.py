"""Tests for table location and row extraction."""

import pytest
from lxml import etree, html

from tablescout.dom.tables import (
    find_table_after_sentinel,
    link_parser,
    number_parser,
    parse_elements,
    parse_table,
    parse_table_after_sentinel,
    text_parser,
)
from tablescout.exceptions import ScrapeError, SentinelNotFoundError, TableNotFoundError

SCORES_HTML = """
<html>
  <body>
    <h2 id="scores">Scores</h2>
    <table>
      <tr><th>Name</th><th>Score</th><th>Profile</th></tr>
      <tr><td> Alice </td><td>1,010</td><td><a href="/people/alice">Alice</a></td></tr>
      <tr><td>Bob</td><td>20</td><td>-</td></tr>
    </table>
  </body>
</html>
"""


def _cell(markup):
    if markup.startswith("<td"):
        table = html.fragment_fromstring(f"<table><tr>{markup}</tr></table>")
        return table.xpath(".//td")[0]
    return html.fragment_fromstring(markup)


def _table_html(row_count):
    rows = "".join(f"<tr><td>row {i}</td><td>{i}</td></tr>" for i in range(row_count))
    return f"<html><body><h2>Data</h2><table><tr><th>Label</th><th>Value</th></tr>{rows}</table></body></html>"


class TestCellParsers:
    def test_text_parser_trims(self):
        assert text_parser(_cell("<td>  Helsinki \n</td>")) == "Helsinki"

    def test_text_parser_includes_nested_text(self):
        assert text_parser(_cell("<td><b>New</b> permit</td>")) == "New permit"

    def test_link_parser(self):
        assert link_parser(_cell('<td><a href="/x">x</a></td>')) == "/x"
        assert link_parser(_cell('<a href="/direct">x</a>')) == "/direct"
        assert link_parser(_cell("<td>no link</td>")) is None

    @pytest.mark.parametrize(
        "markup, expected",
        [
            ("<td>42</td>", 42),
            ("<td>1,234</td>", 1234),
            ("<td> 3.5 </td>", 3.5),
            ("<td></td>", None),
            ("<td>n/a</td>", None),
        ],
    )
    def test_number_parser(self, markup, expected):
        assert number_parser(_cell(markup)) == expected


class TestParseElements:
    """Tests for parse_elements."""

    def test_maps_fields_to_columns(self):
        cells = [_cell("<td>Alice</td>"), _cell("<td>10</td>")]
        record = parse_elements(cells, {"name": 0, "score": 1})
        assert record == {"name": "Alice", "score": "10"}

    def test_field_parsers_override_default(self):
        cells = [_cell("<td>Alice</td>"), _cell("<td>10</td>")]
        record = parse_elements(cells, {"name": 0, "score": 1}, {"score": number_parser})
        assert record == {"name": "Alice", "score": 10}

    def test_custom_default_parser(self):
        cells = [_cell("<td>Alice</td>")]
        record = parse_elements(cells, {"name": 0}, default_parser=lambda el: el.tag)
        assert record == {"name": "td"}

    def test_missing_column_parses_as_empty_cell(self):
        cells = [_cell("<td>Alice</td>")]
        record = parse_elements(cells, {"name": 0, "score": 5})
        assert record == {"name": "Alice", "score": ""}

    def test_field_order_follows_keys(self):
        cells = [_cell("<td>a</td>"), _cell("<td>b</td>"), _cell("<td>c</td>")]
        keys = {"third": 2, "first": 0, "second": 1}

        record = parse_elements(cells, keys)

        assert list(record) == ["third", "first", "second"]
        assert record == {"third": "c", "first": "a", "second": "b"}

    def test_same_column_for_several_fields(self):
        cells = [_cell('<td><a href="/a">A</a></td>')]
        record = parse_elements(cells, {"label": 0, "href": 0}, {"href": link_parser})
        assert record == {"label": "A", "href": "/a"}


class TestParseTable:
    """Tests for parse_table."""

    def test_skips_header_row(self):
        document = html.document_fromstring(SCORES_HTML)
        table = document.cssselect("table")[0]

        records = parse_table(table, {"name": 0, "score": 1})

        assert records == [{"name": "Alice", "score": "1,010"}, {"name": "Bob", "score": "20"}]

    def test_rows_inside_tbody(self):
        document = html.document_fromstring(
            "<html><body><table><tbody>"
            "<tr><th>Name</th></tr><tr><td>Alice</td></tr><tr><td>Bob</td></tr>"
            "</tbody></table></body></html>"
        )
        table = document.cssselect("table")[0]

        assert parse_table(table, {"name": 0}) == [{"name": "Alice"}, {"name": "Bob"}]

    def test_header_only_table(self):
        document = html.document_fromstring("<html><body><table><tr><th>Name</th></tr></table></body></html>")
        table = document.cssselect("table")[0]

        assert parse_table(table, {"name": 0}) == []

    @pytest.mark.parametrize("row_count", [0, 1, 5])
    def test_one_record_per_data_row(self, row_count):
        document = html.document_fromstring(_table_html(row_count))
        table = document.cssselect("table")[0]

        records = parse_table(table, {"label": 0, "value": 1})

        assert len(records) == row_count
        assert [record["label"] for record in records] == [f"row {i}" for i in range(row_count)]

    def test_parsing_leaves_document_unchanged(self):
        document = html.document_fromstring(SCORES_HTML)
        before = etree.tostring(document)
        table = document.cssselect("table")[0]

        first = parse_table(table, {"name": 0, "score": 1})
        second = parse_table(table, {"name": 0, "score": 1})

        assert first == second
        assert etree.tostring(document) == before


class TestFindTableAfterSentinel:
    """Tests for locating the table that follows a sentinel."""

    def test_finds_table(self):
        document = html.document_fromstring(SCORES_HTML)
        table = find_table_after_sentinel(document, "#scores")
        assert table.tag == "table"

    def test_missing_sentinel(self):
        document = html.document_fromstring(SCORES_HTML)

        with pytest.raises(SentinelNotFoundError) as exc_info:
            find_table_after_sentinel(document, "#missing")

        assert exc_info.value.selector == "#missing"
        assert "#missing" in str(exc_info.value)

    def test_missing_table(self):
        document = html.document_fromstring("<html><body><h2 id='s'>Title</h2><p>text</p></body></html>")

        with pytest.raises(TableNotFoundError) as exc_info:
            find_table_after_sentinel(document, "#s")

        assert exc_info.value.selector == "#s"
        assert isinstance(exc_info.value, ScrapeError)

    def test_sentinel_without_table_is_skipped(self):
        document = html.document_fromstring(
            """
            <html><body>
              <section><h3>Notes</h3></section>
              <section><h3>Data</h3><table id="data"></table></section>
            </body></html>
            """
        )
        table = find_table_after_sentinel(document, "h3")
        assert table.get("id") == "data"

    def test_first_table_wins_for_several_sentinels(self):
        document = html.document_fromstring(
            """
            <html><body>
              <section><h3>One</h3><table id="one"></table></section>
              <section><h3>Two</h3><table id="two"></table></section>
            </body></html>
            """
        )
        assert find_table_after_sentinel(document, "h3").get("id") == "one"

    def test_callable_selector(self):
        document = html.document_fromstring(SCORES_HTML)

        def scores_heading(doc):
            return doc.xpath("//h2[text()='Scores']")

        table = find_table_after_sentinel(document, scores_heading)
        assert table.tag == "table"

    def test_callable_selector_in_error_message(self):
        document = html.document_fromstring(SCORES_HTML)

        def nothing(doc):
            return []

        with pytest.raises(SentinelNotFoundError, match="nothing"):
            find_table_after_sentinel(document, nothing)


class TestParseTableAfterSentinel:
    def test_end_to_end(self):
        document = html.document_fromstring(SCORES_HTML)

        records = parse_table_after_sentinel(
            document,
            "//h2[@id='scores']",
            {"name": 0, "score": 1, "profile": 2},
            {"score": number_parser, "profile": link_parser},
        )

        assert records == [
            {"name": "Alice", "score": 1010, "profile": "/people/alice"},
            {"name": "Bob", "score": 20, "profile": None},
        ]
