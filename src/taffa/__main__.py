"""
TÄFFÄ CLI entry point.

Usage:
    python -m taffa              # Kivy app
    python -m taffa --headless   # Log each publication to the console
    python -m taffa --web        # Start web server
    python -m taffa --once       # Run a single cycle and print it
    python -m taffa --help       # Show help
"""

import argparse
import logging
import os
import signal
import sys
import threading
from pathlib import Path

from .core.config import Config
from .core.poller import Poller
from .core.predictor import load_predictor
from .core.result import Publication, visitors_line, waiting_time_line


def setup_logging(config: Config) -> None:
    """Configure logging based on config."""
    log_config = config["logging"]
    level = getattr(logging, str(log_config.get("level", "INFO")).upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = log_config.get("file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        handlers=handlers,
    )


def build_poller(config: Config) -> Poller:
    """Load the model and create a poller from configuration."""
    predictor = load_predictor(config.get("model.path", "assets/model.tflite"))
    return Poller(
        url=config.get("server.url", ""),
        predictor=predictor,
        timeout=config.get("server.timeout"),
    )


def render_publication(publication: Publication, config: Config) -> str:
    """Format a publication as the two display lines."""
    capacity = config.get("display.capacity", 200)
    return "\n".join([
        visitors_line(publication.count_text, capacity),
        waiting_time_line(publication.prediction_text),
    ])


def run_once(config: Config) -> None:
    """Run one cycle and print the result."""
    poller = build_poller(config)
    try:
        publication = poller.run_cycle()
    finally:
        poller.close()
    print(render_publication(publication, config))


def run_headless(config: Config) -> None:
    """Poll until interrupted, logging every publication."""
    logger = logging.getLogger(__name__)
    poller = build_poller(config)

    def log_publication(publication: Publication) -> None:
        for line in render_publication(publication, config).splitlines():
            logger.info(line)

    poller.state.subscribe(log_publication)

    shutdown = threading.Event()

    def stop(signum, frame):
        shutdown.set()

    signal.signal(signal.SIGINT, stop)
    signal.signal(signal.SIGTERM, stop)

    poller.start()
    try:
        while not shutdown.wait(1.0):
            pass
        logger.info("Shutdown requested")
    finally:
        poller.stop()


def run_web_server(config: Config) -> None:
    """Start the Flask web server with the poller in the background."""
    logger = logging.getLogger(__name__)
    logger.info("Starting web server...")

    from .web.app import create_app

    poller = build_poller(config)
    app = create_app(config, poller=poller)

    web_config = config["web"]
    host = web_config.get("host", "0.0.0.0")
    port = web_config.get("port", 5000)
    debug = config.get("app.debug", False)

    logger.info(f"Web server starting at http://{host}:{port}")

    poller.start()
    try:
        # The reloader would start a second poller in the child process
        app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)
    finally:
        poller.stop()


def run_mobile(config: Config) -> None:
    """Start the Kivy app."""
    from .mobile.app import run_mobile_app

    run_mobile_app(config)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="TÄFFÄ - Visitor count and waiting time monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m taffa --url http://host/visitors       Run the app against a server
    python -m taffa --headless                       Poll and log to the console
    python -m taffa --web                            Serve the status page on port 5000
    python -m taffa --once --model ./model.tflite    Single cycle with another model
        """,
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--web", action="store_true", help="Start web server instead of the Kivy app"
    )
    mode.add_argument(
        "--headless", action="store_true", help="Poll without a UI, logging each result"
    )
    mode.add_argument(
        "--once", action="store_true", help="Run a single poll cycle, print it and exit"
    )
    parser.add_argument(
        "--url", type=str, help="Visitor count endpoint (overrides config)"
    )
    parser.add_argument(
        "--model", type=str, help="Path to the .tflite model (overrides config)"
    )
    parser.add_argument(
        "--config", type=str, help="Path to configuration directory"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug mode"
    )

    args = parser.parse_args()

    # Command-line overrides go through the environment so reload() keeps them
    if args.url is not None:
        os.environ["TAFFA_SERVER_URL"] = args.url
    if args.model is not None:
        os.environ["TAFFA_MODEL_PATH"] = str(Path(args.model).resolve())
    if args.debug:
        os.environ["TAFFA_ENV"] = "development"

    config_dir = Path(args.config) if args.config else None
    config = Config(config_dir)

    setup_logging(config)

    logger = logging.getLogger(__name__)
    logger.info("TÄFFÄ starting...")
    logger.info(f"Environment: {config.env}")

    if args.once:
        run_once(config)
    elif args.headless:
        run_headless(config)
    elif args.web:
        run_web_server(config)
    else:
        run_mobile(config)


if __name__ == "__main__":
    main()
