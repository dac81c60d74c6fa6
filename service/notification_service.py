# service/notification_service.py
import logging
import threading
from collections import defaultdict

from util.constant import ADMIN_ROOM, ORDER_ROOM_PREFIX

logger = logging.getLogger("notification_logger")

NEW_ORDER_EVENT = "newOrder"
ORDER_UPDATE_EVENT = "orderUpdate"
ORDER_STATUS_UPDATE_EVENT = "orderStatusUpdate"


def order_room(order_number):
    return f"{ORDER_ROOM_PREFIX}{order_number}"


class NotificationHub:
    """
    Bảng thành viên nhóm (kết nối -> các room) cho thông báo realtime.

    Gửi kiểu fire-and-forget: mỗi kết nối nhận tối đa một lần cho mỗi lần phát,
    không ack, không lưu lại. Client kết nối sau khi sự kiện đã phát sẽ không
    bao giờ nhận được sự kiện đó.

    sender(event, payload, sid) là hàm gửi thực tế (Flask-SocketIO ở production).
    """

    def __init__(self, sender):
        self._sender = sender
        self._lock = threading.Lock()
        self._connections = set()
        self._rooms = defaultdict(set)  # room -> {sid}

    # ---------- Quản lý kết nối / room ----------

    def connect(self, sid):
        with self._lock:
            self._connections.add(sid)

    def disconnect(self, sid):
        with self._lock:
            self._connections.discard(sid)
            for room in list(self._rooms):
                self._rooms[room].discard(sid)
                if not self._rooms[room]:
                    del self._rooms[room]

    def join(self, sid, room):
        with self._lock:
            self._connections.add(sid)
            self._rooms[room].add(sid)

    def leave(self, sid, room):
        with self._lock:
            members = self._rooms.get(room)
            if not members:
                return
            members.discard(sid)
            if not members:
                del self._rooms[room]

    def members(self, room):
        with self._lock:
            return set(self._rooms.get(room, ()))

    def rooms_of(self, sid):
        with self._lock:
            return {room for room, sids in self._rooms.items() if sid in sids}

    @property
    def connections(self):
        with self._lock:
            return set(self._connections)

    # ---------- Phát sự kiện ----------

    def emit(self, event, payload, rooms=(), broadcast=False):
        """
        Gửi event tới hợp các room (hoặc mọi kết nối nếu broadcast), mỗi sid một lần.
        Trả về số kết nối gửi thành công.
        """
        with self._lock:
            if broadcast:
                recipients = set(self._connections)
            else:
                recipients = set()
            for room in rooms:
                recipients |= self._rooms.get(room, set())

        delivered = 0
        for sid in recipients:
            try:
                self._sender(event, payload, sid)
            except Exception as e:
                logger.warning(f"Không gửi được {event} tới {sid}: {e}")
                continue
            delivered += 1
        return delivered

    def notify_new_order(self, order):
        return self.emit(NEW_ORDER_EVENT, order, rooms=[ADMIN_ROOM])

    def notify_order_status(self, order_id, status, order):
        """orderUpdate cho room của đơn, orderStatusUpdate cho admin + toàn bộ client."""
        self.emit(
            ORDER_UPDATE_EVENT,
            {"order": order},
            rooms=[order_room(order["order_number"])],
        )
        self.emit(
            ORDER_STATUS_UPDATE_EVENT,
            {"orderId": order_id, "status": status, "order": order},
            rooms=[ADMIN_ROOM],
            broadcast=True,
        )


def socketio_sender(socketio):
    def send(event, payload, sid):
        socketio.emit(event, payload, to=sid)

    return send
