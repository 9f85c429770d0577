"""Tests for structured logging setup."""

import json

from secretlens.utils.logger import configure_logging, get_logger


class TestConfigureLogging:
    def test_json_lines_to_stderr(self, capsys):
        configure_logging("INFO", json_output=True)
        get_logger("test").info("rule_scan_timeout", rule_id="secretlens.aws.1")
        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "rule_scan_timeout"
        assert event["rule_id"] == "secretlens.aws.1"
        assert event["level"] == "info"

    def test_level_filters(self, capsys):
        configure_logging("WARNING")
        log = get_logger("test")
        log.info("quiet")
        log.warning("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_unknown_level_defaults_to_warning(self, capsys):
        configure_logging("chatty")
        get_logger("test").info("hidden")
        assert "hidden" not in capsys.readouterr().err
