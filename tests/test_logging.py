"""Tests for log sanitizing helpers"""
import logging

from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging


class TestSanitize:
    """Tests for sanitize helpers."""

    def test_id_is_truncated(self):
        assert sanitize_id_for_logging("ORD-LX3K9Q2A-1F2B") == "ORD-LX3K9Q2A"

    def test_empty_values(self):
        assert sanitize_id_for_logging(None) == "N/A"
        assert sanitize_string_for_logging("") == "N/A"

    def test_forged_lines_are_escaped(self):
        """Test a search term cannot start a new log line"""
        assert sanitize_string_for_logging("cafe\nERROR - fake\x00") == "cafe\\nERROR - fake"

    def test_long_text_is_truncated(self):
        assert sanitize_string_for_logging("x" * 60) == "x" * 50 + "..."
        assert sanitize_string_for_logging("abcdef", max_length=3) == "abc..."


def test_package_logger_has_single_handler():
    """Test importing logging twice does not stack handlers"""
    get_logger("storefront.cart.store")
    assert len(logging.getLogger("storefront").handlers) == 1
    assert get_logger("storefront.cart.store") is logging.getLogger("storefront.cart.store")
