"""
Flask application factory for the TÄFFÄ web surface.

Serves the same two lines as the mobile screen plus JSON endpoints, so the
current count and prediction can be read from any browser or script.
"""

import logging
from pathlib import Path

from flask import Flask, render_template

from ..core.config import Config
from ..core.poller import POLL_INTERVAL_S, Poller
from ..core.result import visitors_line, waiting_time_line
from ..core.state import PublishedState

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    state: PublishedState | None = None,
    poller: Poller | None = None,
) -> Flask:
    """
    Application factory for Flask app.

    Args:
        config: TÄFFÄ configuration, or None to load defaults
        state: Published state to serve. A fresh one if None.
        poller: Poller feeding the state, used for health reporting

    Returns:
        Configured Flask application
    """
    app_dir = Path(__file__).parent
    app = Flask(__name__, template_folder=str(app_dir / "templates"))

    if config is None:
        config = Config()
    if state is None:
        state = poller.state if poller is not None else PublishedState()

    app.config["TAFFA_CONFIG"] = config
    app.config["TAFFA_STATE"] = state
    app.config["TAFFA_POLLER"] = poller

    from .routes import api

    app.register_blueprint(api.bp, url_prefix="/api")

    @app.route("/")
    def index() -> str:
        """Visitor count and waiting time page."""
        publication = state.current
        return render_template(
            "index.html",
            title=config.get("display.title", "TÄFFÄ"),
            visitors=visitors_line(publication.count_text, config.get("display.capacity", 200)),
            waiting_time=waiting_time_line(publication.prediction_text),
            refresh_seconds=int(POLL_INTERVAL_S),
            version=config.get("app.version", "0.1.0"),
        )

    @app.route("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {
            "status": "ok",
            "version": config.get("app.version", "0.1.0"),
            "polling": poller is not None and poller.is_running,
            "model_loaded": poller is not None and poller.predictor is not None,
        }

    logger.info("Flask app created")
    return app
