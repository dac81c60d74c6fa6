import logging

from flask import Blueprint, abort, jsonify

from Form.forms import load_form
from Form.support_form import SupportMessageForm
from service.email_service import EmailDeliveryError, send_support_email
from util.until import is_valid_email

support_bp = Blueprint("support", __name__, url_prefix="/api/support")
logger = logging.getLogger(__name__)


@support_bp.route("/message", methods=["POST"])
def send_message():
    """Form liên hệ: gửi tin nhắn của khách tới email admin."""
    form = load_form(SupportMessageForm)
    if not form.validate():
        abort(400, description="Please provide name, email, subject, and message")
    if not is_valid_email(form.email.data.strip()):
        abort(400, description="Please provide a valid email address")

    try:
        send_support_email(
            name=form.name.data.strip(),
            email=form.email.data.strip(),
            phone=form.phone.data or None,
            subject=form.subject.data.strip(),
            message=form.message.data,
        )
    except EmailDeliveryError as e:
        logger.error(f"Error in send_message: {e}")
        abort(500, description="Failed to send message. Please try again later.")

    return jsonify(
        {
            "success": True,
            "message": "Your message has been sent successfully. We will get back to you soon!",
        }
    )
