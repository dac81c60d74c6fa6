from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Optional

from Form.forms import ApiForm


class SupportMessageForm(ApiForm):
    name = StringField("Name", validators=[DataRequired()])
    email = StringField("Email", validators=[DataRequired()])
    phone = StringField("Phone", validators=[Optional()])
    subject = StringField("Subject", validators=[DataRequired()])
    message = TextAreaField("Message", validators=[DataRequired()])
