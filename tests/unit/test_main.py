"""Tests for main entry point."""
import pytest
from unittest.mock import patch, AsyncMock, MagicMock
import tempfile


SAMPLE_CONFIG = """
api:
  base_url: "https://example.com/api"
poller:
  max_retries: 3
dashboard:
  page_size: 10
"""


def write_config() -> str:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write(SAMPLE_CONFIG)
        return f.name


def test_parse_args_default():
    from webhook_dashboard.__main__ import parse_args

    args = parse_args([])

    assert args.config == "config/default.yaml"
    assert args.log_level == "INFO"
    assert args.query == ""


def test_parse_args_custom_config():
    from webhook_dashboard.__main__ import parse_args

    args = parse_args(["--config", "custom.yaml"])

    assert args.config == "custom.yaml"


def test_parse_args_short_flags():
    from webhook_dashboard.__main__ import parse_args

    args = parse_args(["-c", "test.yaml", "-l", "WARNING", "-q", "aapl"])

    assert args.config == "test.yaml"
    assert args.log_level == "WARNING"
    assert args.query == "aapl"


def test_parse_args_rejects_unknown_level():
    from webhook_dashboard.__main__ import parse_args

    with pytest.raises(SystemExit):
        parse_args(["--log-level", "LOUD"])


def test_setup_logging():
    from webhook_dashboard.__main__ import setup_logging
    import logging

    for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        setup_logging(level)

    assert len(logging.getLogger().handlers) > 0
    assert logging.getLogger("aiohttp").level == logging.WARNING


def test_main_runs_dashboard():
    from webhook_dashboard.__main__ import main

    with patch('webhook_dashboard.__main__.Dashboard') as MockDashboard, \
            patch('webhook_dashboard.__main__.ConsoleRenderer') as MockRenderer, \
            patch('webhook_dashboard.__main__.run_dashboard', new=AsyncMock()) as mock_run:
        dashboard = MagicMock()
        MockDashboard.return_value = dashboard

        result = main(["--config", write_config(), "--query", "buy"])

        assert result == 0
        config = MockDashboard.call_args.args[0]
        assert config.api.base_url == "https://example.com/api"
        MockRenderer.return_value.attach.assert_called_once()
        dashboard.set_search_query.assert_called_once_with("buy")
        mock_run.assert_awaited_once_with(dashboard)


def test_main_handles_keyboard_interrupt():
    from webhook_dashboard.__main__ import main

    with patch('webhook_dashboard.__main__.Dashboard') as MockDashboard, \
            patch('webhook_dashboard.__main__.ConsoleRenderer'), \
            patch('webhook_dashboard.__main__.run_dashboard', side_effect=KeyboardInterrupt):
        dashboard = MagicMock()
        MockDashboard.return_value = dashboard

        result = main(["--config", write_config()])

        assert result == 0
        dashboard.stop.assert_called_once()


def test_main_returns_error_on_unexpected_exception():
    from webhook_dashboard.__main__ import main

    with patch('webhook_dashboard.__main__.Dashboard') as MockDashboard, \
            patch('webhook_dashboard.__main__.ConsoleRenderer'), \
            patch('webhook_dashboard.__main__.run_dashboard', side_effect=RuntimeError("boom")):
        dashboard = MagicMock()
        MockDashboard.return_value = dashboard

        result = main(["--config", write_config()])

        assert result == 1
        dashboard.stop.assert_called_once()


def test_main_returns_error_on_config_error():
    from webhook_dashboard.__main__ import main

    result = main(["--config", "/nonexistent/config.yaml"])

    assert result == 1


@pytest.mark.asyncio
async def test_run_dashboard_awaits_run():
    from webhook_dashboard.__main__ import run_dashboard

    dashboard = MagicMock()
    dashboard.run = AsyncMock()

    await run_dashboard(dashboard)

    dashboard.run.assert_awaited_once()
