"""Tests for pipeline orchestrator and CLI.

These tests write small Portable Text documents to tmp_path and run the
load → format → save workflow, plus CLI argument parsing.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pt_structure.cli import main
from pt_structure.config import Config, FormatterConfig
from pt_structure.exceptions import ParseError
from pt_structure.ir.schema import ListItemBlock, TextBlock
from pt_structure.pipeline import Pipeline


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _simple_document() -> list[dict]:
    return [
        {
            "_type": "block",
            "_key": "h",
            "style": "h1",
            "children": [{"_type": "span", "text": "Title", "marks": []}],
            "markDefs": [],
        },
        {
            "_type": "block",
            "_key": "p",
            "style": "normal",
            "children": [{"_type": "span", "text": "Body text.", "marks": ["strong"]}],
            "markDefs": [],
        },
        {
            "_type": "block",
            "_key": "blank",
            "style": "normal",
            "children": [{"_type": "span", "text": " ", "marks": []}],
            "markDefs": [],
        },
        {
            "_type": "block",
            "_key": "li",
            "listItem": "bullet",
            "children": [{"_type": "span", "text": "Point", "marks": []}],
            "markDefs": [],
        },
    ]


def _write_document(tmp_path: Path, data=None, name: str = "doc.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(_simple_document() if data is None else data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Pipeline tests
# ---------------------------------------------------------------------------

class TestPipelineLoad:
    def test_load_block_array(self, tmp_path):
        blocks = Pipeline().load(_write_document(tmp_path))
        assert len(blocks) == 4
        assert isinstance(blocks[0], TextBlock)
        assert isinstance(blocks[3], ListItemBlock)

    def test_load_field(self, tmp_path):
        path = _write_document(tmp_path, {"title": "Doc", "body": _simple_document()})
        blocks = Pipeline().load(path, field="body")
        assert len(blocks) == 4

    def test_load_field_from_config(self, tmp_path):
        path = _write_document(tmp_path, {"body": _simple_document()})
        config = Config.from_yaml_string("output:\n  field: body\n")
        assert len(Pipeline(config).load(path)) == 4

    def test_missing_field(self, tmp_path):
        path = _write_document(tmp_path, {"body": []})
        with pytest.raises(ParseError, match="'content' not found"):
            Pipeline().load(path, field="content")

    def test_object_without_field(self, tmp_path):
        path = _write_document(tmp_path, {"body": []})
        with pytest.raises(ParseError, match="Expected a block array"):
            Pipeline().load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            Pipeline().load(tmp_path / "nonexistent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ParseError, match="Invalid JSON"):
            Pipeline().load(path)

    def test_invalid_block(self, tmp_path):
        path = _write_document(tmp_path, [{"_type": "block", "children": 5}])
        with pytest.raises(ParseError, match="Invalid Portable Text"):
            Pipeline().load(path)


class TestPipelineConvert:
    def test_convert_returns_json(self, tmp_path):
        data = json.loads(Pipeline().convert(_write_document(tmp_path)))
        assert [node["type"] for node in data] == ["h1", "paragraph", "bullet_list"]
        assert data[1]["content"][0] == {
            "type": "strong",
            "content": [{"type": "text", "content": "Body text."}],
        }

    def test_convert_writes_output(self, tmp_path):
        out = tmp_path / "out.json"
        json_str = Pipeline().convert(_write_document(tmp_path), out)
        assert out.read_text(encoding="utf-8") == json_str

    def test_convert_allow_empty_blocks(self, tmp_path):
        config = Config(formatter=FormatterConfig(allow_empty_blocks=True))
        data = json.loads(Pipeline(config).convert(_write_document(tmp_path)))
        assert len(data) == 4

    def test_convert_indent(self, tmp_path):
        config = Config.from_yaml_string("output:\n  indent: 4\n")
        json_str = Pipeline(config).convert(_write_document(tmp_path))
        assert json_str.startswith('[\n    {')


class TestPipelineReport:
    def test_convert_produces_report(self, tmp_path):
        pipeline = Pipeline()
        pipeline.convert(_write_document(tmp_path))
        report = pipeline.last_report
        assert report is not None
        assert report.source_file == "doc.json"
        assert report.input_block_count == 4
        assert report.dropped_blank_blocks == 1
        assert report.output_node_count == 3
        assert report.load_time_seconds >= 0

    def test_convert_saves_report(self, tmp_path):
        out = tmp_path / "output.json"
        Pipeline().convert(_write_document(tmp_path), out, save_report=True)
        report_file = tmp_path / "output.report.json"
        assert report_file.exists()
        data = json.loads(report_file.read_text())
        assert data["blocks"]["dropped_blank"] == 1

    def test_report_next_to_input_without_output(self, tmp_path):
        Pipeline().convert(_write_document(tmp_path), save_report=True)
        assert (tmp_path / "doc.report.json").exists()

    def test_convert_saves_report_custom_path(self, tmp_path):
        custom_report = tmp_path / "custom.json"
        Pipeline().convert(_write_document(tmp_path), save_report=True, report_path=custom_report)
        assert custom_report.exists()


# ---------------------------------------------------------------------------
# CLI tests
# ---------------------------------------------------------------------------

class TestCLI:
    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "render-ready tree" in result.output

    def test_cli_convert_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", "--help"])
        assert result.exit_code == 0
        assert "--allow-empty-blocks" in result.output
        assert "--report" in result.output

    def test_cli_convert_to_stdout(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(_write_document(tmp_path))])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [node["type"] for node in data] == ["h1", "paragraph", "bullet_list"]

    def test_cli_convert_to_file(self, tmp_path):
        out = tmp_path / "result.json"
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(_write_document(tmp_path)), str(out)])
        assert result.exit_code == 0
        assert "Generated" in result.output
        assert out.exists()

    def test_cli_convert_allow_empty_blocks(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(_write_document(tmp_path)), "--allow-empty-blocks"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 4

    def test_cli_convert_field(self, tmp_path):
        path = _write_document(tmp_path, {"body": _simple_document()})
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(path), "--field", "body"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 3

    def test_cli_convert_with_report(self, tmp_path):
        out = tmp_path / "output.json"
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(_write_document(tmp_path)), str(out), "--report"])
        assert result.exit_code == 0
        assert "1 blank dropped" in result.output
        assert (tmp_path / "output.report.json").exists()

    def test_cli_convert_invalid_input(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("not json", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_cli_convert_missing_input(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(tmp_path / "nope.json")])
        assert result.exit_code != 0

    def test_cli_config_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("formatter:\n  allow_empty_blocks: true\n")
        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(config_file), "convert", str(_write_document(tmp_path))])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 4

    def test_cli_stats(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["stats", str(_write_document(tmp_path))])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["blocks"]["input"] == 4
        assert data["nodes_by_type"] == {"bullet_list": 1, "h1": 1, "paragraph": 1}

    def test_cli_verbose(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "--help"])
        assert result.exit_code == 0
