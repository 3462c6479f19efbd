"""
Tests for YAML configuration parsing and logging setup.
"""

import logging
import sys
from pathlib import Path

import pytest
import yaml

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))

from utils import log_setup
from utils.config_parser import (
    load_config,
    get_nested,
    flatten_config,
    to_shell_var_name,
    export_as_shell,
    validate_config,
)


# ============================================================================
# Tests: Loading
# ============================================================================

class TestLoadConfig:
    """Tests for load_config."""

    def test_load(self, temp_dir, sample_config):
        config_path = temp_dir / "config.yaml"
        config_path.write_text(yaml.safe_dump(sample_config))
        assert load_config(str(config_path)) == sample_config

    def test_empty_file(self, temp_dir):
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")
        assert load_config(str(config_path)) == {}

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(str(temp_dir / "missing.yaml"))

    def test_invalid_yaml(self, temp_dir):
        config_path = temp_dir / "bad.yaml"
        config_path.write_text("reference: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_config(str(config_path))

    def test_example_config_parses(self, project_root):
        config = load_config(str(project_root / "config" / "config.example.yaml"))
        assert get_nested(config, "reference.detect_compression") == "extension"


# ============================================================================
# Tests: Lookup and Export
# ============================================================================

class TestGetNested:
    """Tests for get_nested."""

    def test_present(self, sample_config):
        assert get_nested(sample_config, "logging.level") == "DEBUG"

    def test_builtin_default(self):
        assert get_nested({}, "logging.level") == "INFO"
        assert get_nested({}, "reference.detect_compression") == "extension"

    def test_explicit_default(self, sample_config):
        assert get_nested(sample_config, "reference.missing", "fallback") == "fallback"

    def test_unknown_key(self, sample_config):
        assert get_nested(sample_config, "no.such.key") is None

    def test_non_dict_intermediate(self):
        assert get_nested({"reference": "ref.fa"}, "reference.fasta") is None


class TestExport:
    """Tests for flatten_config, to_shell_var_name and export_as_shell."""

    def test_flatten(self):
        config = {"reference": {"fasta": "ref.fa", "sniff": True}, "logging": {"log_file": None}}
        assert flatten_config(config) == {
            "reference.fasta": "ref.fa",
            "reference.sniff": "true",
            "logging.log_file": "",
        }

    def test_shell_var_name(self):
        assert to_shell_var_name("reference.fasta") == "REFGENOME_REFERENCE_FASTA"
        assert to_shell_var_name("output.summary-tsv") == "REFGENOME_OUTPUT_SUMMARY_TSV"

    def test_export_quotes(self):
        exported = export_as_shell({"reference": {"fasta": "it's.fa"}})
        assert exported == "export REFGENOME_REFERENCE_FASTA='it'\"'\"'s.fa'"


# ============================================================================
# Tests: Validation
# ============================================================================

class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid(self, sample_config):
        is_valid, errors = validate_config(sample_config)
        assert is_valid
        assert errors == []

    def test_missing_reference(self):
        is_valid, errors = validate_config({})
        assert not is_valid
        assert any("reference.fasta" in e for e in errors)

    def test_placeholder_reference(self):
        is_valid, errors = validate_config({"reference": {"fasta": "/path/to/reference.fa.gz"}})
        assert not is_valid

    def test_reference_not_found(self, temp_dir):
        config = {"reference": {"fasta": str(temp_dir / "missing.fa")}}
        is_valid, errors = validate_config(config)
        assert not is_valid
        assert any("not found" in e for e in errors)
        assert validate_config(config, check_files=False) == (True, [])

    def test_bad_detection_mode(self, sample_config):
        sample_config["reference"]["detect_compression"] = "guess"
        is_valid, errors = validate_config(sample_config)
        assert not is_valid
        assert any("detect_compression" in e for e in errors)

    def test_bad_log_level(self, sample_config):
        sample_config["logging"]["level"] = "LOUD"
        is_valid, errors = validate_config(sample_config)
        assert not is_valid
        assert any("logging.level" in e for e in errors)


# ============================================================================
# Tests: Logging Setup
# ============================================================================

class TestConfigureLogging:
    """Tests for configure_logging (basicConfig is intercepted)."""

    @pytest.fixture
    def basic_config_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(log_setup.logging, "basicConfig", lambda **kw: calls.append(kw))
        yield calls
        for call in calls:
            for handler in call["handlers"]:
                handler.close()

    def test_level_name(self, basic_config_calls):
        log_setup.configure_logging("debug")
        (call,) = basic_config_calls
        assert call["level"] == logging.DEBUG
        assert call["format"] == log_setup.LOG_FORMAT
        assert len(call["handlers"]) == 1

    def test_numeric_level(self, basic_config_calls):
        log_setup.configure_logging(logging.WARNING)
        assert basic_config_calls[0]["level"] == logging.WARNING

    def test_unknown_level(self, basic_config_calls):
        with pytest.raises(ValueError):
            log_setup.configure_logging("LOUD")
        assert basic_config_calls == []

    def test_log_file(self, basic_config_calls, temp_dir):
        log_path = temp_dir / "logs" / "reference.log"
        log_setup.configure_logging("INFO", log_path)
        handlers = basic_config_calls[0]["handlers"]
        assert len(handlers) == 2
        assert isinstance(handlers[1], logging.FileHandler)
        assert log_path.parent.is_dir()


# ============================================================================
# Tests: Command Line
# ============================================================================

class TestConfigParserMain:
    """Tests for config_parser.main()."""

    @pytest.fixture
    def config_file(self, temp_dir, sample_config):
        config_path = temp_dir / "config.yaml"
        config_path.write_text(yaml.safe_dump(sample_config))
        return str(config_path)

    def run(self, monkeypatch, *argv):
        from utils import config_parser

        monkeypatch.setattr(sys, "argv", ["config_parser.py", *argv])
        config_parser.main()

    def test_get(self, monkeypatch, capsys, config_file):
        self.run(monkeypatch, config_file, "--get", "logging.level")
        assert capsys.readouterr().out == "DEBUG\n"

    def test_get_missing_key(self, monkeypatch, config_file):
        with pytest.raises(SystemExit) as exc_info:
            self.run(monkeypatch, config_file, "--get", "no.such.key")
        assert exc_info.value.code == 1

    def test_validate(self, monkeypatch, capsys, config_file):
        self.run(monkeypatch, config_file, "--validate")
        assert "Configuration is valid!" in capsys.readouterr().out

    def test_export(self, monkeypatch, capsys, config_file):
        self.run(monkeypatch, config_file, "--export")
        assert "export REFGENOME_LOGGING_LEVEL='DEBUG'" in capsys.readouterr().out

    def test_summary_fills_defaults(self, monkeypatch, capsys, temp_dir):
        config_path = temp_dir / "config.yaml"
        config_path.write_text("reference:\n  fasta: ref.fa\n")
        self.run(monkeypatch, str(config_path))
        out = capsys.readouterr().out
        assert "reference.fasta" in out
        assert "logging.level" in out and "INFO" in out

    def test_malformed_yaml(self, monkeypatch, capsys, temp_dir):
        config_path = temp_dir / "bad.yaml"
        config_path.write_text("reference: [unclosed\n")
        with pytest.raises(SystemExit) as exc_info:
            self.run(monkeypatch, str(config_path))
        assert exc_info.value.code == 1
        assert "Error loading" in capsys.readouterr().err
