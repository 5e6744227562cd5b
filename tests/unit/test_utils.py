"""
Unit Tests for Logging and Exception Utilities
"""
import logging

from vte_manager.utils import (
    ConfigurationMissingError,
    InvalidInputError,
    VTEManagerError,
    mask_identifier,
    setup_logging,
)
from vte_manager.utils.logging import StructuredFormatter


class TestMaskIdentifier:

    def test_keeps_last_digits(self):
        assert mask_identifier("12345678") == "*****678"

    def test_short_and_blank(self):
        assert mask_identifier("12") == "**"
        assert mask_identifier("") == "-"
        assert mask_identifier(None) == "-"


class TestStructuredFormatter:

    def test_plain_format(self):
        record = logging.LogRecord("vte_manager.test", logging.WARNING, __file__, 1, "hello %s", ("ward",), None)
        line = StructuredFormatter(use_color=False).format(record)
        assert "WARNING" in line
        assert "[vte_manager.test]" in line
        assert line.endswith("hello ward")
        assert "\033[" not in line

    def test_setup_logging_replaces_handlers(self, tmp_path):
        root = logging.getLogger()
        saved = (root.level, list(root.handlers))
        try:
            setup_logging("debug", str(tmp_path / "vte.log"))
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
        finally:
            for handler in root.handlers:
                handler.close()
            root.setLevel(saved[0])
            root.handlers[:] = saved[1]


class TestExceptions:

    def test_invalid_input_to_dict(self):
        error = InvalidInputError("pain_score must be between 0 and 10", field="pain_score")
        assert isinstance(error, VTEManagerError)
        assert error.to_dict() == {
            "error": "INVALID_INPUT",
            "message": "pain_score must be between 0 and 10",
            "details": {"field": "pain_score"},
        }

    def test_configuration_missing(self):
        error = ConfigurationMissingError("no url", setting="VTE_SHEET_URL")
        assert error.code == "CONFIGURATION_MISSING"
        assert error.setting == "VTE_SHEET_URL"
