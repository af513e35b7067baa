"""Tests for building and writing output files."""

import json

import pytest

from tablescout.exceptions import RenderError
from tablescout.renderer.renderer import OutputDescriptor, build_outputs, render_files, write_outputs
from tablescout.renderer.serializers import to_csv, to_json

RECORDS = [{"name": "Alice", "score": 10}, {"name": "Bob", "score": 20}]


class TestBuildOutputs:
    """Tests for build_outputs."""

    def test_one_descriptor_per_format(self):
        outputs = build_outputs(RECORDS, ["json", "yaml", "csv", "md"])

        assert [output.ext for output in outputs] == [".json", ".yaml", ".csv", ".md"]
        assert all(output.data is RECORDS for output in outputs)

    def test_unknown_format(self):
        with pytest.raises(RenderError, match="xlsx"):
            build_outputs(RECORDS, ["json", "xlsx"])

    def test_headers_apply_to_tabular_formats(self):
        csv_output, json_output = build_outputs(RECORDS, ["csv", "json"], headers=["score", "name"])

        assert csv_output.serializer(csv_output.data).splitlines()[0] == "score,name"
        assert json_output.serializer is to_json

    def test_tabular_format_rejects_non_tabular_data(self):
        with pytest.raises(RenderError, match="list of records"):
            build_outputs("plain text", ["json", "csv"])

        assert build_outputs("plain text", ["json", "yaml"])[0].ext == ".json"

    def test_no_formats(self):
        assert build_outputs(RECORDS, []) == []


class TestWriteOutputs:
    """Tests for write_outputs."""

    @pytest.mark.asyncio
    async def test_writes_one_file_per_descriptor(self, tmp_path):
        outputs = [
            OutputDescriptor(ext=".json", data=RECORDS, serializer=to_json),
            OutputDescriptor(ext=".csv", data=RECORDS, serializer=to_csv),
        ]

        paths = await write_outputs(outputs, "scores", str(tmp_path))

        assert paths == [str(tmp_path / "scores.json"), str(tmp_path / "scores.csv")]
        assert json.loads((tmp_path / "scores.json").read_text(encoding="utf-8")) == RECORDS
        assert (tmp_path / "scores.csv").read_text(encoding="utf-8") == "name,score\nAlice,10\nBob,20\n"

    @pytest.mark.asyncio
    async def test_creates_output_dir(self, tmp_path):
        output_dir = tmp_path / "nested" / "out"

        await write_outputs([OutputDescriptor(".json", {"a": 1}, to_json)], "data", str(output_dir))

        assert (output_dir / "data.json").exists()

    @pytest.mark.asyncio
    async def test_custom_serializer(self, tmp_path):
        output = OutputDescriptor(ext=".txt", data=["a", "b"], serializer=lambda data: "\n".join(data))

        await write_outputs([output], "lines", str(tmp_path))

        assert (tmp_path / "lines.txt").read_text(encoding="utf-8") == "a\nb"

    @pytest.mark.asyncio
    async def test_serializer_error_propagates(self, tmp_path):
        output = OutputDescriptor(ext=".csv", data="not tabular", serializer=to_csv)

        with pytest.raises(RenderError):
            await write_outputs([output], "bad", str(tmp_path))


class TestRenderFiles:
    @pytest.mark.asyncio
    async def test_binds_formats_and_location(self, tmp_path):
        calls = []

        def formats(data, headers):
            calls.append(headers)
            return build_outputs(data, ["json", "md"], headers)

        render = render_files(formats, "report", str(tmp_path))
        paths = await render(RECORDS, ["name"])

        assert calls == [["name"]]
        assert paths == [str(tmp_path / "report.json"), str(tmp_path / "report.md")]
        assert (tmp_path / "report.md").read_text(encoding="utf-8").splitlines()[0] == "| name |"
