from decimal import Decimal
from enum import Enum


class ORDER_STATUS(Enum):
    pending = "pending"
    confirmed = "confirmed"
    preparing = "preparing"
    out_for_delivery = "out_for_delivery"
    delivered = "delivered"
    cancelled = "cancelled"

    @classmethod
    def values(cls):
        return [status.value for status in cls]


class PAYMENT_METHOD(Enum):
    cash = "cash"
    card = "card"
    mobile_money = "mobile_money"

    @classmethod
    def values(cls):
        return [method.value for method in cls]


class USER_ROLE(Enum):
    customer = "customer"
    admin = "admin"


DEFAULT_DELIVERY_FEE = Decimal("5.00")
ORDER_NUMBER_PREFIX = "HE"

# Room cho socket
ADMIN_ROOM = "admin"
ORDER_ROOM_PREFIX = "order_"

ALLOWED_IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "webp"]
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB

DEFAULT_CATEGORIES = [
    ("Appetizers", "Start your meal with our delicious appetizers", 1),
    ("Main Course", "Hearty and satisfying main dishes", 2),
    ("Desserts", "Sweet treats to end your meal", 3),
    ("Beverages", "Refreshing drinks and beverages", 4),
]
