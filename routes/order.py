from flask import Blueprint, abort, jsonify, request
from flask_login import current_user, login_required

from Form.forms import first_error, load_form
from Form.order_form import OrderForm, OrderStatusForm
from service.order_service import (
    DEFAULT_LIST_LIMIT,
    create_order,
    get_order_by_number,
    get_order_for_user,
    get_order_stats,
    list_orders,
    list_user_orders,
    parse_order_items,
    update_order_status,
)
from util.auth import admin_required

order_bp = Blueprint("order", __name__, url_prefix="/api/orders")


@order_bp.route("", methods=["POST"])
def place_order():
    """Đặt hàng. Có Bearer token thì gắn đơn cho user, không thì là khách vãng lai."""
    form = load_form(OrderForm)
    if not form.validate():
        abort(400, description=first_error(form))
    items = parse_order_items((request.get_json(silent=True) or {}).get("items"))

    user = current_user if current_user.is_authenticated else None
    order = create_order(form.to_order_data(), items, user=user)
    return jsonify({"success": True, "data": order}), 201


@order_bp.route("", methods=["GET"])
@admin_required
def orders():
    """Danh sách đơn cho admin, lọc theo status (tuỳ chọn) và giới hạn số lượng."""
    status = request.args.get("status") or None
    limit = request.args.get("limit", DEFAULT_LIST_LIMIT, type=int)
    if limit < 1:
        abort(400, description="limit must be a positive integer")
    return jsonify({"success": True, "data": list_orders(status=status, limit=limit)})


@order_bp.route("/stats", methods=["GET"])
@admin_required
def order_stats():
    return jsonify({"success": True, "data": get_order_stats()})


@order_bp.route("/my/orders", methods=["GET"])
@login_required
def my_orders():
    return jsonify({"success": True, "data": list_user_orders(current_user.id)})


@order_bp.route("/track/<string:order_number>", methods=["GET"])
def track_order(order_number):
    """Tra cứu công khai bằng mã đơn, không cần đăng nhập."""
    return jsonify({"success": True, "data": get_order_by_number(order_number)})


@order_bp.route("/<int:order_id>", methods=["GET"])
@login_required
def order_detail(order_id):
    return jsonify({"success": True, "data": get_order_for_user(order_id, current_user)})


@order_bp.route("/<int:order_id>/status", methods=["PUT"])
@admin_required
def order_status(order_id):
    form = load_form(OrderStatusForm)
    if not form.validate():
        abort(400, description="Invalid status")
    order = update_order_status(order_id, form.status.data)
    return jsonify({"success": True, "data": order})
