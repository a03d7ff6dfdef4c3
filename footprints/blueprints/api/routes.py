"""Read and aggregate endpoints over the building collection.

Paths keep the historical short form (``/all``, ``/byyear`` ...) so existing
clients continue to work. Payload field typing follows ``BUILDING_FIELD_TYPING``.
"""

from flask import Blueprint, jsonify, request

from footprints.services.building_service import get_building_service
from footprints.utils.api_responses import api_route

api_bp = Blueprint("api", __name__)


@api_bp.route("/all", methods=["GET"])
@api_route
def list_buildings():
    return jsonify(get_building_service().list_buildings())


@api_bp.route("/building", methods=["GET"])
@api_route
def get_building():
    return jsonify(get_building_service().get_building(request.args.get("id")))


@api_bp.route("/byyear", methods=["GET"])
@api_route
def buildings_by_year():
    return jsonify(get_building_service().buildings_by_year(request.args.get("year")))


@api_bp.route("/smallerthan", methods=["GET"])
@api_route
def buildings_at_most_height():
    """Buildings at or below ``height``, sorted by decreasing height."""
    return jsonify(get_building_service().buildings_at_most_height(request.args.get("height")))


@api_bp.route("/groupyear", methods=["GET"])
@api_route
def group_by_year():
    return jsonify(get_building_service().year_groups())


@api_bp.route("/data", methods=["GET"])
@api_route
def building_stats():
    return jsonify(get_building_service().stats())
