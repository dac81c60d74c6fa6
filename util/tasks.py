import logging

from service.email_service import send_order_confirmation_email

logger = logging.getLogger("cronjob")


def send_order_confirmation(order):
    """Job rq: gửi email xác nhận cho đơn vừa tạo."""
    message_id = send_order_confirmation_email(order)
    logger.info(f"Đã gửi email xác nhận đơn {order.get('order_number')}: {message_id}")
    return message_id
