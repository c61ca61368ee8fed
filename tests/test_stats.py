"""Tests for reading webpack reports."""

import json

import pytest
from pydantic import ValidationError

from bundle_analyzer.exceptions import MalformedReportError
from bundle_analyzer.stats import Compilation, Module, MultiCompilation, Reason, load_stats, parse_stats


def test_single_compilation(single_bundle_stats):
    stats = parse_stats(single_bundle_stats)

    assert isinstance(stats, Compilation)
    assert stats.name == "main"
    assert len(stats.modules) == 7
    assert stats.modules[6].reasons == [Reason(moduleId=3), Reason(moduleId=5)]


def test_multi_compilation(multi_bundle_stats):
    stats = parse_stats(multi_bundle_stats)

    assert isinstance(stats, MultiCompilation)
    assert [c.name for c in stats.children] == ["app", "vendor"]


def test_modules_key_decides_shape():
    """A report with modules is a single bundle even if it has children."""
    stats = parse_stats({"modules": [], "children": [{"modules": []}]})
    assert isinstance(stats, Compilation)


def test_module_fields():
    module = Module.model_validate({"id": 4, "name": "./~/a/b.js", "size": 12, "reasons": [{"moduleId": 1}]})
    assert module.id == 4
    assert module.name == "./~/a/b.js"
    assert module.size == 12
    assert module.reasons[0].module_id == 1


def test_reasons_default_to_empty():
    module = Module.model_validate({"id": 0, "name": "./src/index.js", "size": 1})
    assert module.reasons == []


def test_null_reason_module_id():
    module = Module.model_validate(
        {"id": 0, "name": "./src/index.js", "size": 1, "reasons": [{"moduleId": None, "type": "single entry"}]}
    )
    assert module.reasons[0].module_id is None


def test_string_ids_are_kept():
    module = Module.model_validate({"id": "./src/a.js", "name": "./src/a.js", "size": 1})
    assert module.id == "./src/a.js"


def test_unknown_keys_are_ignored(single_bundle_stats):
    stats = parse_stats(single_bundle_stats)
    assert not hasattr(stats, "hash")
    assert not hasattr(stats.modules[0], "identifier")


def test_load_stats(fixtures_dir):
    stats = load_stats((fixtures_dir / "single_bundle.json").read_text())
    assert isinstance(stats, Compilation)


def test_load_stats_from_bytes(fixtures_dir):
    stats = load_stats((fixtures_dir / "single_bundle.json").read_bytes())
    assert isinstance(stats, Compilation)
    assert stats.name == "main"


class TestMalformedReports:
    """Reports that do not match the schema raise MalformedReportError."""

    def test_invalid_json(self):
        with pytest.raises(MalformedReportError, match="not valid JSON") as exc_info:
            load_stats("webpack: compiling...\n{")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
        assert exc_info.value.raw_input == "webpack: compiling...\n{"

    def test_undecodable_bytes(self):
        raw = b'{"modules": [], "name": "\xff\xfe"}'
        with pytest.raises(MalformedReportError, match="not UTF-8") as exc_info:
            load_stats(raw)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert exc_info.value.raw_input == raw

    def test_empty_input(self):
        with pytest.raises(MalformedReportError):
            load_stats("")

    @pytest.mark.parametrize("data", [[], "modules", 3, None])
    def test_top_level_not_an_object(self, data):
        with pytest.raises(MalformedReportError, match="JSON object"):
            parse_stats(data)

    def test_missing_module_field(self):
        data = {"modules": [{"id": 0, "name": "./src/index.js", "reasons": []}]}
        with pytest.raises(MalformedReportError, match="size") as exc_info:
            parse_stats(data)
        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert exc_info.value.raw_input is data

    def test_wrong_field_type(self):
        with pytest.raises(MalformedReportError):
            parse_stats({"modules": [{"id": 0, "name": "./src/index.js", "size": "big"}]})

    def test_neither_modules_nor_children(self):
        with pytest.raises(MalformedReportError, match="children"):
            parse_stats({"hash": "abc"})

    def test_bad_child_compilation(self):
        with pytest.raises(MalformedReportError):
            parse_stats({"children": [{"name": "app"}]})
