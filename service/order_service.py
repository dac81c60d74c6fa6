# service/order_service.py
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from flask import abort, current_app
from redis.exceptions import RedisError
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from database_init import db, unit_of_work
from models.order import Order
from models.order_item import OrderItem
from util.constant import DEFAULT_DELIVERY_FEE, ORDER_STATUS
from util.db_retry import retry_db
from util.until import (
    decimal_to_float,
    generate_order_number,
    isoformat_or_none,
    to_money,
)

logger = logging.getLogger("order_logger")

DEFAULT_LIST_LIMIT = 50
RECENT_ORDERS_LIMIT = 5


# ========== SERIALIZE ==========


def order_item_to_dict(item):
    return {
        "id": item.id,
        "menu_item_id": item.menu_item_id,
        "menu_item_name": item.menu_item_name,
        "quantity": item.quantity,
        "price": decimal_to_float(item.price),
        "subtotal": decimal_to_float(item.subtotal),
    }


def order_to_dict(order, include_items=True):
    """Header đơn hàng + mảng order_items (aggregated order)."""
    data = {
        "id": order.id,
        "user_id": order.user_id,
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "delivery_address": order.delivery_address,
        "delivery_lat": decimal_to_float(order.delivery_lat),
        "delivery_lng": decimal_to_float(order.delivery_lng),
        "subtotal": decimal_to_float(order.subtotal),
        "delivery_fee": decimal_to_float(order.delivery_fee),
        "total": decimal_to_float(order.total),
        "status": order.status,
        "payment_method": order.payment_method,
        "notes": order.notes,
        "created_at": isoformat_or_none(order.created_at),
        "updated_at": isoformat_or_none(order.updated_at),
    }
    if include_items:
        data["order_items"] = [order_item_to_dict(item) for item in order.order_items]
    return data


# ========== HELPERS ==========


def _hub():
    return current_app.extensions["notification_hub"]


def _aggregated_query():
    return Order.query.options(selectinload(Order.order_items))


def _fetch_aggregated(order_id):
    def query():
        db.session.expire_all()
        order = _aggregated_query().filter(Order.id == order_id).first()
        return order_to_dict(order) if order else None

    return retry_db(query)


def parse_order_items(raw_items):
    """
    Kiểm tra danh sách món: [{id, name, price, quantity}], không được rỗng.
    Trả về list dict đã chuẩn hoá (price Decimal, quantity int).
    """
    if not isinstance(raw_items, list) or not raw_items:
        abort(400, description="Order must contain at least one item")

    items = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            abort(400, description="Invalid order item")
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            abort(400, description="Each item requires a name")
        name = name.strip()
        menu_item_id = raw.get("id")
        if isinstance(menu_item_id, str) and menu_item_id.isdigit():
            menu_item_id = int(menu_item_id)
        if menu_item_id is not None and (
            isinstance(menu_item_id, bool) or not isinstance(menu_item_id, int)
        ):
            abort(400, description=f"Invalid menu item reference for {name}")
        try:
            price = to_money(raw.get("price"))
        except (InvalidOperation, ValueError, TypeError):
            price = None
        if price is None or not price.is_finite() or price < 0:
            abort(400, description=f"Invalid price for item {name}")
        quantity = raw.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            abort(400, description=f"Invalid quantity for item {name}")
        items.append(
            {
                "menu_item_id": menu_item_id,
                "name": name,
                "price": price,
                "quantity": quantity,
            }
        )
    return items


def calculate_totals(items, delivery_fee=DEFAULT_DELIVERY_FEE):
    """subtotal = Σ price × quantity, total = subtotal + phí giao hàng."""
    subtotal = sum(
        (item["price"] * item["quantity"] for item in items), Decimal("0.00")
    )
    subtotal = to_money(subtotal)
    delivery_fee = to_money(delivery_fee)
    return subtotal, delivery_fee, to_money(subtotal + delivery_fee)


# ========== LIFECYCLE ==========


def create_order(data, items, user=None):
    """
    Tạo đơn hàng ở trạng thái pending cùng các order item trong một transaction.
    Trả về aggregated order và báo newOrder cho room admin.
    """
    subtotal, delivery_fee, total = calculate_totals(
        items, current_app.config.get("DELIVERY_FEE", DEFAULT_DELIVERY_FEE)
    )

    with unit_of_work() as session:
        order = Order(
            user_id=user.id if user else None,
            order_number=generate_order_number(),
            customer_name=data["customer_name"],
            customer_email=data.get("customer_email"),
            customer_phone=data["customer_phone"],
            delivery_address=data["delivery_address"],
            delivery_lat=data.get("delivery_lat"),
            delivery_lng=data.get("delivery_lng"),
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            total=total,
            payment_method=data["payment_method"],
            notes=data.get("notes"),
            status=ORDER_STATUS.pending.value,
        )
        session.add(order)
        session.flush()  # Lấy order.id

        for item in items:
            session.add(
                OrderItem(
                    order_id=order.id,
                    menu_item_id=item["menu_item_id"],
                    menu_item_name=item["name"],
                    quantity=item["quantity"],
                    price=item["price"],
                    subtotal=to_money(item["price"] * item["quantity"]),
                )
            )
        order_id = order.id

    complete_order = _fetch_aggregated(order_id)
    logger.info(f"Tạo đơn {complete_order['order_number']} (#{order_id}), total={total}")

    _hub().notify_new_order(complete_order)
    _enqueue_confirmation_email(complete_order)
    return complete_order


def update_order_status(order_id, status):
    """
    Đổi trạng thái đơn. Giá trị ngoài enum -> 400, không đụng vào DB.
    Không chặn chuyển trạng thái ngược (vd delivered -> pending).
    """
    if status not in ORDER_STATUS.values():
        abort(400, description="Invalid status")

    with unit_of_work():
        order = db.session.get(Order, order_id)
        if not order:
            abort(404, description="Order not found")
        order.status = status
        order.updated_at = datetime.now()

    complete_order = _fetch_aggregated(order_id)
    logger.info(f"Đơn {complete_order['order_number']} chuyển sang {status}")

    _hub().notify_order_status(order_id, status, complete_order)
    return complete_order


def _enqueue_confirmation_email(order):
    if not current_app.config.get("ORDER_CONFIRMATION_EMAILS"):
        return
    if not order.get("customer_email"):
        logger.info(f"Đơn {order['order_number']} không có email, bỏ qua email xác nhận")
        return

    from queue_config import get_email_queue
    from util.tasks import send_order_confirmation

    try:
        get_email_queue().enqueue(send_order_confirmation, order)
    except RedisError as e:
        logger.error(f"Không enqueue được email xác nhận cho {order['order_number']}: {e}")


# ========== QUERY ==========


def get_order(order_id):
    order = _fetch_aggregated(order_id)
    if not order:
        abort(404, description="Order not found")
    return order


def get_order_for_user(order_id, user):
    """Chủ đơn hoặc admin mới được xem, người khác nhận 403."""
    order = get_order(order_id)
    if not user.is_admin and order["user_id"] != user.id:
        abort(403, description="Not authorized")
    return order


def get_order_by_number(order_number):
    def query():
        order = (
            _aggregated_query().filter(Order.order_number == order_number).first()
        )
        return order_to_dict(order) if order else None

    order = retry_db(query)
    if not order:
        abort(404, description="Order not found")
    return order


def list_user_orders(user_id):
    def query():
        orders = (
            _aggregated_query()
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        return [order_to_dict(o) for o in orders]

    return retry_db(query)


def list_orders(status=None, limit=DEFAULT_LIST_LIMIT):
    def query():
        q = _aggregated_query()
        if status:
            q = q.filter(Order.status == status)
        orders = q.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()
        return [order_to_dict(o) for o in orders]

    return retry_db(query)


def get_order_stats(now=None):
    """Tổng số đơn, số đơn pending, doanh thu hôm nay (từ 0h giờ địa phương), 5 đơn mới nhất."""
    now = now or datetime.now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    def query():
        total_orders = db.session.query(func.count(Order.id)).scalar()
        pending_orders = (
            db.session.query(func.count(Order.id))
            .filter(Order.status == ORDER_STATUS.pending.value)
            .scalar()
        )
        today_totals = (
            db.session.query(Order.total).filter(Order.created_at >= today).all()
        )
        recent = (
            Order.query.order_by(Order.created_at.desc(), Order.id.desc())
            .limit(RECENT_ORDERS_LIMIT)
            .all()
        )
        return {
            "totalOrders": total_orders or 0,
            "pendingOrders": pending_orders or 0,
            "todayRevenue": float(sum((row[0] for row in today_totals), Decimal("0"))),
            "recentOrders": [order_to_dict(o, include_items=False) for o in recent],
        }

    return retry_db(query)
