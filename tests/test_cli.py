"""Tests for the auto-adjust command-line interface."""

import json

import pytest

from auto_adjust import AdjustmentKind, AdjustmentRecord, Style, StyleRule, read_style, write_style
from auto_adjust.cli import main
from auto_adjust.config import get_global_config


@pytest.fixture
def style_file(tmp_path):
    style = Style(
        rules=(StyleRule(centroid=(0.0, 1.0), delta=AdjustmentRecord(exposure=0.2), weight=4),),
        computed_kinds={AdjustmentKind.LIGHTING},
    )
    return write_style(style, tmp_path / "warm.json")


class TestCli:
    def test_validate_ok(self, style_file):
        assert main(['validate', str(style_file)]) == 0

    def test_validate_bad_version(self, style_file):
        data = json.loads(style_file.read_text())
        data['version'] = 7
        style_file.write_text(json.dumps(data))
        assert main(['validate', str(style_file)]) == 1

    def test_inspect(self, style_file):
        assert main(['inspect', str(style_file)]) == 0

    def test_inspect_bad_version(self, style_file):
        data = json.loads(style_file.read_text())
        data['version'] = 7
        style_file.write_text(json.dumps(data))
        assert main(['inspect', str(style_file)]) == 1

    def test_convert_to_yaml(self, style_file, tmp_path):
        destination = tmp_path / "converted" / "warm.yaml"
        assert main(['convert', str(style_file), str(destination)]) == 0
        assert read_style(destination) == read_style(style_file)

    def test_missing_file(self, tmp_path):
        assert main(['validate', str(tmp_path / "nope.json")]) == 2

    def test_log_file(self, style_file, tmp_path):
        log_file = tmp_path / "logs" / "cli.log"
        assert main(['--log-file', str(log_file), 'validate', str(style_file)]) == 0
        assert "[OK]" in log_file.read_text()

    def test_log_file_from_config(self, style_file, tmp_path, monkeypatch):
        config = get_global_config()
        monkeypatch.chdir(tmp_path)
        config.set('logging.log_to_file', True)
        try:
            assert main(['validate', str(style_file)]) == 0
        finally:
            config.reload()
        assert "[OK]" in (tmp_path / "logs" / "auto_adjust.log").read_text()
