"""Main application entry point for the ArangoDB statistics monitor."""

import argparse
import asyncio
import os
import signal
import sys
import time
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config.loader import ConfigLoader
from .config.models import MonitorConfig
from .collectors.arangodb_collector import ArangoDBCollector
from .collectors.base import CycleSummary
from .services.sink import LoggingSink, Sink
from .utils.logger import metrics_logger, setup_logger


class MonitorApp:
    """
    Main monitoring application.

    Runs collection cycles once or on a fixed interval and writes every
    record to a sink.
    """

    def __init__(
        self,
        config: MonitorConfig,
        log_level: Optional[str] = None,
        sink: Optional[Sink] = None
    ):
        """
        Initialize monitoring application.

        Args:
            config: Validated configuration
            log_level: Overrides config.logging.level when given
            sink: Record destination, defaults to a LoggingSink
        """
        self.config = config
        self.logger = setup_logger("arangodb_monitor", log_level or config.logging.level)
        self.sink = sink or LoggingSink(metrics_logger(self.logger))
        self.collector = ArangoDBCollector(config.arangodb, self.logger)
        self.scheduler = None
        self._stop: Optional[asyncio.Event] = None

    @classmethod
    def from_file(cls, config_path: str, log_level: Optional[str] = None) -> "MonitorApp":
        """
        Load configuration and build the application.

        Raises:
            SystemExit: If configuration is missing or invalid
        """
        logger = setup_logger("arangodb_monitor", log_level or "INFO")
        try:
            logger.info(f"Loading configuration from {config_path}")
            config = ConfigLoader.load_from_file(config_path)
        except FileNotFoundError:
            logger.error(
                f"Configuration file not found: {config_path}\n"
                "Create one with: arangodb-monitor --sample-config > config/config.yaml"
            )
            sys.exit(1)
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}", exc_info=True)
            sys.exit(1)

        return cls(config, log_level=log_level)

    async def run_cycle(self) -> CycleSummary:
        """Execute one collection cycle across all configured endpoints."""
        start_time = time.time()
        summary = await self.collector.gather(self.sink)
        self.logger.info(
            f"Cycle completed in {time.time() - start_time:.2f}s",
            extra={
                "configured": summary.configured,
                "skipped": summary.skipped,
                "succeeded": summary.succeeded,
                "failed": summary.failed,
            }
        )
        return summary

    async def run_forever(self):
        """
        Run cycles every monitoring.interval_seconds until SIGINT/SIGTERM.

        The first cycle runs immediately; overlapping cycles are coalesced.
        """
        interval = self.config.monitoring.interval_seconds
        self._stop = asyncio.Event()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._request_stop, sig)

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.run_cycle,
            trigger=IntervalTrigger(seconds=interval),
            id='collection_cycle',
            name='ArangoDB statistics collection',
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        self.logger.info(f"Scheduler started, collecting every {interval}s")

        try:
            await self.run_cycle()
            await self._stop.wait()
        finally:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.logger.info("Scheduler stopped")

    def _request_stop(self, signum):
        self.logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
        self._stop.set()


def main(argv=None):
    """
    CLI entry point.

    Parses command-line arguments and starts the monitor.
    """
    parser = argparse.ArgumentParser(
        description=ArangoDBCollector.description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Collect on the configured interval (default)
  arangodb-monitor --config config/config.yaml

  # Run one collection cycle and exit
  arangodb-monitor --run-once

  # Print a sample configuration
  arangodb-monitor --sample-config
        """
    )

    parser.add_argument(
        '--config',
        default='config/config.yaml',
        help='Path to configuration file (default: config/config.yaml)'
    )

    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Run one collection cycle and exit (no scheduler)'
    )

    parser.add_argument(
        '--sample-config',
        action='store_true',
        help='Print a sample configuration file and exit'
    )

    parser.add_argument(
        '--log-level',
        default=os.getenv('LOG_LEVEL'),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: from config, or LOG_LEVEL env var)'
    )

    args = parser.parse_args(argv)

    if args.sample_config:
        sys.stdout.write(ArangoDBCollector.sample_config())
        return 0

    app = MonitorApp.from_file(args.config, log_level=args.log_level)

    if args.run_once:
        # Per-endpoint failures are reported through the sink, never as a cycle failure
        asyncio.run(app.run_cycle())
        return 0

    asyncio.run(app.run_forever())
    return 0


if __name__ == '__main__':
    sys.exit(main())
