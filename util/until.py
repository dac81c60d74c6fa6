from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
import random
import re
import string

from util.constant import ORDER_NUMBER_PREFIX

CENT = Decimal("0.01")
CLOUDINARY_PUBLIC_ID_RE = re.compile(r"/v\d+/(.+)\.\w+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def isoformat_or_none(value):
    return value.isoformat() if value else None


def generate_random_string(length=8, alphabet=string.ascii_lowercase + string.digits):
    """Tạo chuỗi ngẫu nhiên gồm chữ và số, mặc định 8 ký tự"""
    return "".join(random.choices(alphabet, k=length))


def generate_order_number(now=None):
    """Mã đơn hàng dạng HE-20251019-7GX2QK, dùng để khách tra cứu."""
    now = now or datetime.now()
    suffix = generate_random_string(6, string.ascii_uppercase + string.digits)
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{suffix}"


def to_money(value):
    """Chuẩn hoá về Decimal 2 chữ số thập phân."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def decimal_to_float(value):
    return float(value) if value is not None else None


def get_cloudinary_public_id(image_url):
    """
    Lấy public id từ URL Cloudinary.
    https://res.cloudinary.com/demo/image/upload/v1234567890/hood-eatery/menu/image.jpg
    -> hood-eatery/menu/image
    """
    if not image_url:
        return None
    matches = CLOUDINARY_PUBLIC_ID_RE.search(image_url)
    return matches.group(1) if matches else None


def is_valid_email(email):
    return bool(email and EMAIL_RE.match(email))
