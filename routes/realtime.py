import logging

from flask import current_app, request

from service.notification_service import order_room
from util.constant import ADMIN_ROOM

logger = logging.getLogger("notification_logger")


def _hub():
    return current_app.extensions["notification_hub"]


def handle_connect(auth=None):
    _hub().connect(request.sid)
    logger.info(f"New client connected: {request.sid}")


def handle_disconnect(reason=None):
    _hub().disconnect(request.sid)
    logger.info(f"Client disconnected: {request.sid}")


# TODO: chưa kiểm tra quyền admin khi join room admin (cần gửi token kèm joinAdmin)
def handle_join_admin(*args):
    _hub().join(request.sid, ADMIN_ROOM)
    logger.info(f"Admin joined: {request.sid}")


def handle_track_order(order_number):
    if not order_number:
        return
    _hub().join(request.sid, order_room(order_number))
    logger.info(f"Client {request.sid} tracking order {order_number}")


def handle_leave_order(order_number):
    if not order_number:
        return
    _hub().leave(request.sid, order_room(order_number))
    logger.info(f"Client {request.sid} stopped tracking order {order_number}")


SOCKET_HANDLERS = (
    ("connect", handle_connect),
    ("disconnect", handle_disconnect),
    ("joinAdmin", handle_join_admin),
    ("trackOrder", handle_track_order),
    ("leaveOrder", handle_leave_order),
)


def register_socket_handlers(socketio):
    """Gắn handler vào server socketio hiện tại, gọi sau mỗi lần init_app."""
    for event, handler in SOCKET_HANDLERS:
        socketio.on_event(event, handler)
