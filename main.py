"""Example app — emits sample logs through a Logmonitor instance."""

import argparse
import logging
import os
import random
import signal
import threading

from logmonitor import Logmonitor, load_config

SAMPLE_LEVELS = [logging.DEBUG, logging.INFO, logging.INFO, logging.INFO, logging.WARNING, logging.ERROR]
SAMPLE_MESSAGES = [
    "User logged in",
    "Request processed successfully",
    "Database query completed",
    "Cache miss for key",
    "Configuration reloaded",
    "Health check passed",
    "Connection timeout to upstream",
    "Disk usage above threshold",
]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Logmonitor example app")
    parser.add_argument("--api-key", default=os.environ.get("LOGMONITOR_API_KEY", "demo-key"))
    parser.add_argument("--config", default=None, help="optional YAML config file")
    parser.add_argument("--logs-per-second", type=int, default=5)
    parser.add_argument("--run-time", type=int, default=30)
    parser.add_argument("--user", default="demo-user")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app_logger = logging.getLogger("example")

    shutdown_event = threading.Event()

    def handle_signal(signum, frame):
        app_logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    monitor = Logmonitor(load_config(args.config))
    monitor.initialize(args.api_key)
    monitor.set_user(args.user)

    try:
        app_logger.info("App started", extra={"data": {"pid": os.getpid()}})
        try:
            raise ValueError("sample failure")
        except ValueError:
            app_logger.exception("Handled a sample exception")

        for _ in range(args.run_time):
            if shutdown_event.is_set():
                break
            for _ in range(args.logs_per_second):
                app_logger.log(random.choice(SAMPLE_LEVELS), random.choice(SAMPLE_MESSAGES))
            shutdown_event.wait(timeout=1.0)
    finally:
        monitor.clear_user()
        monitor.dispose()


if __name__ == "__main__":
    main()
