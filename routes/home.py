from flask import Blueprint, jsonify

home_bp = Blueprint("home", __name__, url_prefix="/api")


@home_bp.route("/health")
def health():
    return jsonify({"success": True, "message": "Hood Eatery API is running"})
