"""
REST API routes for TÄFFÄ.

Provides JSON endpoints for:
- Current visitor count and predicted waiting time
- Poller statistics
- Public configuration
"""

import logging

from flask import Blueprint, current_app, jsonify

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


@bp.route("/status")
def status():
    """
    Get the current publication.

    Returns:
        JSON with count, prediction and any fetch error
    """
    publication = current_app.config["TAFFA_STATE"].current
    return jsonify(publication.to_dict())


@bp.route("/poller")
def poller_stats():
    """
    Get poller statistics.

    Returns:
        JSON with running flag, pipeline state and counters
    """
    poller = current_app.config["TAFFA_POLLER"]
    if poller is None:
        return jsonify({"error": "Poller not configured"}), 404

    return jsonify({
        "running": poller.is_running,
        "state": poller.pipeline_state.value,
        "interval_seconds": poller.interval,
        "cycles_completed": poller.cycles_completed,
        "fetch_errors": poller.fetch_errors,
        "model_loaded": poller.predictor is not None,
    })


@bp.route("/config")
def get_config():
    """
    Get current configuration.

    Returns:
        JSON with a safe subset of the configuration
    """
    config = current_app.config["TAFFA_CONFIG"]
    return jsonify({
        "server": {
            "url": config.get("server.url", ""),
            "timeout": config.get("server.timeout"),
        },
        "model": {
            "path": config.get("model.path"),
        },
        "display": {
            "title": config.get("display.title"),
            "capacity": config.get("display.capacity"),
        },
    })
