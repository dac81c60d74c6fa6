from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import StringField, PasswordField
from wtforms.validators import InputRequired, DataRequired, Length, Optional, Regexp

from util.until import EMAIL_RE


def json_formdata():
    """
    Chuyển body JSON phẳng thành MultiDict cho WTForms.
    Bỏ giá trị null/list/dict, ép về chuỗi để các field số/bool parse như form thường.
    """
    data = request.get_json(silent=True) or {}
    formdata = MultiDict()
    for key, value in data.items():
        if value is None or isinstance(value, (list, dict)):
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        formdata.add(key, str(value))
    return formdata


def load_form(form_cls, **kwargs):
    """Body JSON thì đi qua json_formdata, multipart/form thì để Flask-WTF tự đọc."""
    if request.is_json:
        return form_cls(formdata=json_formdata(), **kwargs)
    return form_cls(**kwargs)


def first_error(form, default="Invalid request"):
    for field_name, errors in form.errors.items():
        if errors:
            return f"{field_name}: {errors[0]}"
    return default


class ApiForm(FlaskForm):
    # API dùng Bearer token, không dùng CSRF
    class Meta:
        csrf = False


class RegisterForm(ApiForm):
    email = StringField(
        "Email",
        validators=[
            InputRequired(),
            Length(max=255),
            Regexp(EMAIL_RE, message="Please provide a valid email address"),
        ],
    )
    password = PasswordField("Password", validators=[InputRequired(), Length(min=6)])
    fullName = StringField("Full name", validators=[DataRequired(), Length(max=255)])
    phone = StringField("Phone", validators=[Optional(), Length(max=20)])


class LoginForm(ApiForm):
    email = StringField("Email", validators=[InputRequired()])
    password = PasswordField("Password", validators=[InputRequired()])


class GoogleAuthForm(ApiForm):
    credential = StringField("Credential", validators=[InputRequired()])
