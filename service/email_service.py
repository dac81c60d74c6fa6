# service/email_service.py
import logging
import os

import requests
from markupsafe import escape

logger = logging.getLogger(__name__)

RESEND_API = "https://api.resend.com/emails"
DEFAULT_FROM_EMAIL = "Hood Eatery <onboarding@resend.dev>"
REQUEST_TIMEOUT = 15


class EmailDeliveryError(Exception):
    pass


def _send_email(payload):
    """Gửi email qua Resend HTTP API, trả về id message."""
    api_key = os.getenv("RESEND_API_KEY")
    if not api_key:
        raise EmailDeliveryError("RESEND_API_KEY chưa được cấu hình")

    payload.setdefault("from", os.getenv("RESEND_FROM_EMAIL", DEFAULT_FROM_EMAIL))
    try:
        resp = requests.post(
            RESEND_API,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise EmailDeliveryError(f"Failed to send email: {e}") from e

    if not resp.ok:
        raise EmailDeliveryError(f"Failed to send email: {resp.status_code} {resp.text}")
    return resp.json().get("id")


def send_support_email(name, email, subject, message, phone=None):
    """Chuyển tin nhắn từ form liên hệ tới email admin, reply-to là email khách."""
    # Nội dung do khách nhập, escape trước khi ghép vào HTML
    html = f"""
        <h2>New Support Message from Hood Eatery</h2>
        <p><strong>Name:</strong> {escape(name)}</p>
        <p><strong>Email:</strong> {escape(email)}</p>
        <p><strong>Phone:</strong> {escape(phone or 'Not provided')}</p>
        <p><strong>Subject:</strong> {escape(subject)}</p>
        <p><strong>Message:</strong></p>
        <p>{escape(message)}</p>
        <hr>
        <p><em>This message was sent from the Hood Eatery contact form.</em></p>
        <p><strong>Reply to:</strong> {escape(email)}</p>
    """
    message_id = _send_email(
        {
            "to": os.getenv("ADMIN_EMAIL", "admin@hoodeatery.com"),
            "subject": f"Support Message: {subject}",
            "reply_to": email,
            "html": html,
        }
    )
    logger.info(f"Support email sent: {message_id}")
    return message_id


def send_order_confirmation_email(order):
    if not order.get("customer_email"):
        logger.info("No email provided for order confirmation")
        return None

    items_list = "".join(
        f"<li>{escape(item['menu_item_name'])} x {item['quantity']} - ${item['subtotal']:.2f}</li>"
        for item in order.get("order_items", [])
    )
    html = f"""
        <h2>Thank you for your order, {escape(order['customer_name'])}!</h2>
        <p>Your order has been received and is being prepared.</p>
        <h3>Order Details</h3>
        <p><strong>Order Number:</strong> {order['order_number']}</p>
        <h4>Items:</h4>
        <ul>{items_list}</ul>
        <p><strong>Total:</strong> ${order['total']:.2f}</p>
        <p>You can track your order status using your order number: {order['order_number']}</p>
        <hr>
        <p><em>Hood Eatery - Where passion meets flavor</em></p>
    """
    message_id = _send_email(
        {
            "to": order["customer_email"],
            "subject": f"Order Confirmation - {order['order_number']}",
            "html": html,
        }
    )
    logger.info(f"Order confirmation email sent: {message_id}")
    return message_id
