"""Main entry point for the webhook dashboard."""
import argparse
import asyncio
import logging
import signal
import sys

from webhook_dashboard.core.config import load_config, ConfigError
from webhook_dashboard.core.dashboard import Dashboard
from webhook_dashboard.ui.console import ConsoleRenderer

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="python -m webhook_dashboard",
        description="TradingView Webhook Dashboard - polls the events endpoint and shows a searchable grid",
    )

    parser.add_argument(
        "-c", "--config",
        default="config/default.yaml",
        help="Path to configuration file (default: config/default.yaml)",
    )

    parser.add_argument(
        "-l", "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "-q", "--query",
        default="",
        help="Only show events whose ticker or message contains this text",
    )

    return parser.parse_args(args)


def setup_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, level),
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


async def run_dashboard(dashboard: Dashboard) -> None:
    """Run the dashboard until SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, dashboard.stop)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl-C still raises KeyboardInterrupt
            logger.debug(f"Signal handler for {signum} not supported on this platform")

    await dashboard.run()


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parsed_args = parse_args(args)

    setup_logging(parsed_args.log_level)

    logger.info("Webhook dashboard starting...")
    logger.info(f"Config: {parsed_args.config}")

    dashboard = None

    try:
        # Load configuration
        config = load_config(parsed_args.config)

        # Create the dashboard and attach the console renderer
        dashboard = Dashboard(config)
        renderer = ConsoleRenderer(dashboard)
        renderer.attach()
        dashboard.set_search_query(parsed_args.query)

        # Blocks until stopped
        asyncio.run(run_dashboard(dashboard))

        return 0

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        if dashboard:
            dashboard.stop()
        return 0

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        if dashboard:
            dashboard.stop()
        return 1


if __name__ == "__main__":
    sys.exit(main())
