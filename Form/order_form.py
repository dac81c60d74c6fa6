from wtforms import FloatField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, Regexp

from Form.forms import ApiForm
from util.constant import ORDER_STATUS, PAYMENT_METHOD
from util.until import EMAIL_RE


class OrderForm(ApiForm):
    customerName = StringField("Customer name", validators=[DataRequired(), Length(max=255)])
    customerEmail = StringField(
        "Customer email",
        validators=[Optional(), Regexp(EMAIL_RE, message="Invalid email address")],
    )
    customerPhone = StringField("Customer phone", validators=[DataRequired(), Length(max=20)])
    deliveryAddress = StringField("Delivery address", validators=[DataRequired()])
    deliveryLat = FloatField("Latitude", validators=[Optional()])
    deliveryLng = FloatField("Longitude", validators=[Optional()])
    paymentMethod = SelectField(
        "Payment method",
        choices=PAYMENT_METHOD.values(),
        default=PAYMENT_METHOD.cash.value,
    )
    notes = TextAreaField("Notes", validators=[Optional()])

    def to_order_data(self):
        return {
            "customer_name": self.customerName.data.strip(),
            "customer_email": self.customerEmail.data or None,
            "customer_phone": self.customerPhone.data.strip(),
            "delivery_address": self.deliveryAddress.data.strip(),
            "delivery_lat": self.deliveryLat.data,
            "delivery_lng": self.deliveryLng.data,
            "payment_method": self.paymentMethod.data,
            "notes": self.notes.data or None,
        }


class OrderStatusForm(ApiForm):
    status = SelectField("Status", choices=ORDER_STATUS.values())
