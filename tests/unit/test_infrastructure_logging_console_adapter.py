"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- All LoggerProtocol methods (debug, info, warning, error)
- Exception details on error()
- Context binding
- Renderer selection
"""

from unittest.mock import MagicMock, patch

import pytest

from relauthz.infrastructure.logging.console_adapter import ConsoleAdapter

STRUCTLOG = "relauthz.infrastructure.logging.console_adapter.structlog"


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning"])
    def test_logs_message_with_context(self, level):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            getattr(adapter, level)("relationships_written", quantity=2)

            getattr(mock_logger, level).assert_called_once_with(
                "relationships_written", quantity=2
            )

    def test_error_adds_exception_details(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.error(
                "permission_check_failed",
                error=ConnectionError("refused"),
                permission="read",
            )

            mock_logger.error.assert_called_once_with(
                "permission_check_failed",
                permission="read",
                error_type="ConnectionError",
                error_message="refused",
            )

    def test_error_without_exception(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.error("revert_relationships_failed", quantity=1)

            mock_logger.error.assert_called_once_with(
                "revert_relationships_failed", quantity=1
            )


@pytest.mark.unit
class TestConsoleAdapterBinding:
    """Test context binding."""

    def test_bind_returns_new_adapter_with_context(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            bound_logger = MagicMock()
            mock_logger.bind.return_value = bound_logger
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            bound = adapter.bind(role="auditor")
            bound.info("role_upserted", permissions=2)

            assert bound is not adapter
            mock_logger.bind.assert_called_once_with(role="auditor")
            bound_logger.info.assert_called_once_with("role_upserted", permissions=2)
            mock_logger.info.assert_not_called()


@pytest.mark.unit
class TestConsoleAdapterConfiguration:
    """Test structlog configuration."""

    def test_json_renderer(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(use_json=True)

            processors = mock_structlog.configure.call_args.kwargs["processors"]
            assert mock_structlog.processors.JSONRenderer.return_value in processors
            mock_structlog.dev.ConsoleRenderer.assert_not_called()

    def test_console_renderer(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(use_json=False)

            mock_structlog.dev.ConsoleRenderer.assert_called_once_with(colors=True)
            mock_structlog.processors.JSONRenderer.assert_not_called()
