from flask_wtf.file import FileAllowed, FileField, FileSize
from wtforms import BooleanField, DecimalField, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional

from Form.forms import ApiForm
from util.constant import ALLOWED_IMAGE_EXTENSIONS, MAX_IMAGE_SIZE


class CategoryForm(ApiForm):
    name = StringField("Name", validators=[DataRequired()])
    description = TextAreaField("Description", validators=[Optional()])
    displayOrder = IntegerField("Display order", validators=[Optional()])


class MenuItemForm(ApiForm):
    categoryId = IntegerField("Category", validators=[Optional()])
    name = StringField("Name", validators=[DataRequired()])
    description = TextAreaField("Description", validators=[Optional()])
    price = DecimalField("Price", places=2, validators=[InputRequired(), NumberRange(min=0)])
    originalPrice = DecimalField("Original price", places=2, validators=[Optional(), NumberRange(min=0)])
    isAvailable = BooleanField("Available")
    isFeatured = BooleanField("Featured")
    # extras/portions gửi dạng chuỗi JSON khi upload multipart
    extras = StringField("Extras", validators=[Optional()])
    portions = StringField("Portions", validators=[Optional()])
    image = FileField(
        "Image",
        validators=[
            FileAllowed(
                ALLOWED_IMAGE_EXTENSIONS,
                "Only image files are allowed (jpeg, jpg, png, gif, webp)",
            ),
            FileSize(max_size=MAX_IMAGE_SIZE),
        ],
    )


class MenuItemUpdateForm(MenuItemForm):
    # Cập nhật từng phần: field nào không gửi thì giữ nguyên
    name = StringField("Name", validators=[Optional()])
    price = DecimalField("Price", places=2, validators=[Optional(), NumberRange(min=0)])


def provided(field):
    """Client có gửi field này hay không (phân biệt với giá trị mặc định)."""
    return bool(field.raw_data)
