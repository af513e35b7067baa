"""Serializers turning scrape results into file contents."""

import csv
import io
import json
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

import yaml

from tablescout.exceptions import RenderError


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"


def to_yaml(data: Any) -> str:
    try:
        return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    except yaml.YAMLError as e:
        raise RenderError(f"Cannot serialize data to YAML: {e}") from e


def tabular_rows(data: Any) -> list[Mapping[str, Any]]:
    """
    Return the records of tabular data.

    Accepts a list of records or a mapping of records (as produced by the
    table parser's ``key_by`` option).

    Raises:
        RenderError: If the data is not a collection of records
    """
    if isinstance(data, Mapping):
        rows = list(data.values())
    elif isinstance(data, (list, tuple)):
        rows = list(data)
    else:
        raise RenderError(f"Tabular formats need a list of records, got {type(data).__name__}")

    if not all(isinstance(row, Mapping) for row in rows):
        raise RenderError("Tabular formats need every row to be a mapping of fields")
    return rows


def collect_headers(rows: list[Mapping[str, Any]]) -> list[str]:
    """Union of the rows' field names, in first-seen order."""
    headers: dict[str, None] = {}
    for row in rows:
        for key in row:
            headers.setdefault(str(key), None)
    return list(headers)


def to_csv(data: Any, headers: list[str] | None = None) -> str:
    rows = tabular_rows(data)
    fieldnames = headers or collect_headers(rows)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: _cell(value) for key, value in row.items()})
    return buffer.getvalue()


def to_markdown(data: Any, headers: list[str] | None = None) -> str:
    rows = tabular_rows(data)
    fieldnames = headers or collect_headers(rows)
    lines = [
        "| " + " | ".join(fieldnames) + " |",
        "|" + "|".join("---" for _ in fieldnames) + "|",
    ]
    for row in rows:
        cells = [_cell(row.get(name, "")).replace("|", "\\|") for name in fieldnames]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class OutputFormat(NamedTuple):
    ext: str
    serializer: Callable[..., str]
    tabular: bool


SERIALIZERS: dict[str, OutputFormat] = {
    "json": OutputFormat(".json", to_json, False),
    "yaml": OutputFormat(".yaml", to_yaml, False),
    "csv": OutputFormat(".csv", to_csv, True),
    "md": OutputFormat(".md", to_markdown, True),
}
