"""Flask routes for the consent flow and the map data API."""

from __future__ import annotations

import logging

from flask import Flask, jsonify, redirect, request
from flask.typing import ResponseReturnValue

from .errors import NoCredentialError, StravaAPIError
from .services import MapDataService

LOGGER = logging.getLogger(__name__)


def create_app(service: MapDataService | None = None) -> Flask:
    """Build the Flask app around ``service`` (a default one when omitted)."""

    app = Flask(__name__)
    map_data = service or MapDataService()
    app.extensions["map_data_service"] = map_data

    @app.route("/auth")
    def auth() -> ResponseReturnValue:
        auth_url = map_data.authorization_url()
        LOGGER.info("Redirecting to Strava authorization")
        return redirect(auth_url)

    @app.route("/auth/callback")
    def auth_callback() -> ResponseReturnValue:
        code = request.args.get("code")
        if not code:
            LOGGER.error("No authorization code received")
            return redirect("/?auth=error")
        LOGGER.info("Authorization code received via callback")
        if map_data.exchange_code(code):
            return redirect("/?auth=success")
        return redirect("/?auth=error")

    @app.route("/api/activities")
    def activities() -> ResponseReturnValue:
        start = request.args.get("start") or None
        end = request.args.get("end") or None
        return jsonify(map_data.get_activities(start, end))

    @app.route("/api/auth/status")
    def auth_status() -> ResponseReturnValue:
        return jsonify(map_data.auth_status())

    @app.route("/api/athlete")
    def athlete() -> ResponseReturnValue:
        try:
            return jsonify(map_data.get_athlete())
        except (NoCredentialError, StravaAPIError) as exc:
            LOGGER.error("Error fetching athlete: %s", exc)
            return jsonify({"error": "Failed to fetch athlete data"}), 500

    return app
