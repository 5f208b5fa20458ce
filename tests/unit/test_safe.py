"""Unit tests for the log-and-degrade helpers."""

from unittest.mock import patch

import pytest

from wasfa.utils.safe import safe_execute_async, safe_execute_sync


async def _ok():
    return "value"


async def _fail():
    raise ConnectionError("connection reset")


def _raise_runtime():
    raise RuntimeError("engine disposed")


class TestSafeExecuteAsync:
    """Test safe_execute_async."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        """Test that a successful coroutine's result is passed through."""
        with patch("wasfa.utils.safe.logger") as mock_logger:
            assert await safe_execute_async(_ok(), "Lookup") == "value"

        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_returns_default(self):
        """Test that an exception is absorbed and the default returned."""
        with patch("wasfa.utils.safe.logger"):
            assert await safe_execute_async(_fail(), "Lookup", default_return=[]) == []

    @pytest.mark.asyncio
    async def test_failure_logs_operation_and_exception_type(self):
        """Test that the warning names the operation, the exception type and its message."""
        with patch("wasfa.utils.safe.logger") as mock_logger:
            await safe_execute_async(_fail(), "YouTube search for 'كبسة'")

        mock_logger.warning.assert_called_once_with("YouTube search for 'كبسة': ConnectionError: connection reset")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("level", ["debug", "warning", "error"])
    async def test_log_level_routing(self, level):
        """Test that the failure is logged at the requested level only."""
        with patch("wasfa.utils.safe.logger") as mock_logger:
            await safe_execute_async(_fail(), "Lookup", log_level=level)

        for name in ("debug", "warning", "error"):
            assert getattr(mock_logger, name).called is (name == level)

    @pytest.mark.asyncio
    async def test_unknown_level_falls_back_to_warning(self):
        """Test that an unrecognized level logs a warning."""
        with patch("wasfa.utils.safe.logger") as mock_logger:
            await safe_execute_async(_fail(), "Lookup", log_level="verbose")

        mock_logger.warning.assert_called_once()


class TestSafeExecuteSync:
    """Test safe_execute_sync."""

    def test_returns_result(self):
        """Test that a successful call's result is passed through."""
        assert safe_execute_sync(lambda: 42, "Compute") == 42

    def test_failure_returns_default_and_logs(self):
        """Test that an exception is absorbed, logged and replaced by the default."""
        with patch("wasfa.utils.safe.logger") as mock_logger:
            result = safe_execute_sync(_raise_runtime, "Recipe cache close", log_level="error", default_return=False)

        assert result is False
        mock_logger.error.assert_called_once_with("Recipe cache close: RuntimeError: engine disposed")
