"""Landing page and health probe.

Synopsis:
App-level public routes that do not belong to the buildings API itself.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, make_response, request

from footprints.extensions import limiter

core_bp = Blueprint("core", __name__)

_ROUTES = (
    ("/all", "all buildings"),
    ("/building?id=<bin>", "one building by BIN"),
    ("/byyear?year=<year>", "buildings completed in a year"),
    ("/smallerthan?height=<feet>", "buildings no taller than a height, tallest first"),
    ("/groupyear", "building IDs grouped by construction year"),
    ("/data", "total area, average height and building count"),
)


@core_bp.route("/")
def index():
    """Plain-text landing page listing the API routes."""
    lines = [
        "NYC Building Footprints API",
        f"Source: {current_app.config.get('OPEN_DATA_URL')}",
        "",
    ]
    lines.extend(f"{path:<30} {summary}" for path, summary in _ROUTES)
    response = make_response("\n".join(lines) + "\n")
    response.mimetype = "text/plain"
    return response


@core_bp.route("/health", methods=["GET", "HEAD"])
@limiter.exempt
def health_check():
    """Lightweight probe endpoint for load balancers and uptime monitors."""
    if request.method == "HEAD":
        return "", 200
    return jsonify({"status": "ok"})
