import json
import logging
from datetime import datetime

from flask import Blueprint, abort, current_app, jsonify, request
from sqlalchemy.orm import joinedload

from database_init import db
from Form.forms import first_error, load_form
from Form.menu_form import CategoryForm, MenuItemForm, MenuItemUpdateForm, provided
from models.category import Category
from models.menu_item import MenuItem
from service.image_service import DEFAULT_FOLDER, delete_image, upload_menu_image
from util.auth import admin_required
from util.db_retry import retry_db
from util.until import decimal_to_float, isoformat_or_none

menu_bp = Blueprint("menu", __name__, url_prefix="/api/menu")
logger = logging.getLogger(__name__)


def _category_to_dict(category: Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "display_order": category.display_order,
        "created_at": isoformat_or_none(category.created_at),
    }


def _menu_item_to_dict(item: MenuItem) -> dict:
    """Món ăn kèm tên category (menu_categories) như frontend đang dùng."""
    return {
        "id": item.id,
        "category_id": item.category_id,
        "name": item.name,
        "description": item.description,
        "price": decimal_to_float(item.price),
        "original_price": decimal_to_float(item.original_price),
        "image_url": item.image_url,
        "is_available": item.is_available,
        "is_featured": item.is_featured,
        "extras": item.extras or [],
        "portions": item.portions or [],
        "created_at": isoformat_or_none(item.created_at),
        "updated_at": isoformat_or_none(item.updated_at),
        "menu_categories": {"name": item.category.name if item.category else None},
    }


def _json_list(form_field, key):
    """extras/portions: body JSON gửi list, multipart gửi chuỗi JSON."""
    if request.is_json:
        value = (request.get_json(silent=True) or {}).get(key)
    elif provided(form_field) and form_field.data:
        try:
            value = json.loads(form_field.data)
        except ValueError:
            abort(400, description=f"{key} must be a JSON array")
    else:
        value = None
    if value is not None and not isinstance(value, list):
        abort(400, description=f"{key} must be a JSON array")
    return value


def _get_category_or_404(category_id):
    category = db.session.get(Category, category_id)
    if not category:
        abort(404, description="Category not found")
    return category


def _get_menu_item_or_404(item_id):
    item = retry_db(
        lambda: MenuItem.query.options(joinedload(MenuItem.category))
        .filter(MenuItem.id == item_id)
        .first()
    )
    if not item:
        abort(404, description="Menu item not found")
    return item


def _upload_image(form):
    image = form.image.data
    if not image:
        return None
    return upload_menu_image(
        image, folder=current_app.config.get("CLOUDINARY_FOLDER", DEFAULT_FOLDER)
    )


# ========== CATEGORY ==========


@menu_bp.route("/categories", methods=["GET"])
def list_categories():
    categories = retry_db(
        lambda: Category.query.order_by(Category.display_order.asc(), Category.id).all()
    )
    return jsonify({"success": True, "data": [_category_to_dict(c) for c in categories]})


@menu_bp.route("/categories", methods=["POST"])
@admin_required
def create_category():
    form = load_form(CategoryForm)
    if not form.validate():
        abort(400, description=first_error(form))
    category = Category(
        name=form.name.data.strip(),
        description=form.description.data or None,
        display_order=form.displayOrder.data or 0,
    )
    db.session.add(category)
    db.session.commit()
    return jsonify({"success": True, "data": _category_to_dict(category)}), 201


@menu_bp.route("/categories/<int:category_id>", methods=["PUT"])
@admin_required
def update_category(category_id):
    category = _get_category_or_404(category_id)
    form = load_form(CategoryForm)
    if not form.validate():
        abort(400, description=first_error(form))
    category.name = form.name.data.strip()
    if provided(form.description):
        category.description = form.description.data or None
    if provided(form.displayOrder):
        category.display_order = form.displayOrder.data or 0
    db.session.commit()
    return jsonify({"success": True, "data": _category_to_dict(category)})


@menu_bp.route("/categories/<int:category_id>", methods=["DELETE"])
@admin_required
def delete_category(category_id):
    category = _get_category_or_404(category_id)
    db.session.delete(category)
    db.session.commit()
    return jsonify({"success": True, "message": "Category deleted successfully"})


# ========== MENU ITEM ==========


@menu_bp.route("/items", methods=["GET"])
def list_menu_items():
    category_id = request.args.get("category", type=int)

    def query():
        q = MenuItem.query.options(joinedload(MenuItem.category))
        if category_id:
            q = q.filter(MenuItem.category_id == category_id)
        return q.order_by(MenuItem.id).all()

    items = retry_db(query)
    return jsonify({"success": True, "data": [_menu_item_to_dict(i) for i in items]})


@menu_bp.route("/items/<int:item_id>", methods=["GET"])
def get_menu_item(item_id):
    return jsonify({"success": True, "data": _menu_item_to_dict(_get_menu_item_or_404(item_id))})


@menu_bp.route("/items", methods=["POST"])
@admin_required
def create_menu_item():
    form = load_form(MenuItemForm)
    if not form.validate():
        abort(400, description=first_error(form))
    if form.categoryId.data is not None:
        _get_category_or_404(form.categoryId.data)

    item = MenuItem(
        category_id=form.categoryId.data,
        name=form.name.data.strip(),
        description=form.description.data or None,
        price=form.price.data,
        original_price=form.originalPrice.data,
        is_available=form.isAvailable.data if provided(form.isAvailable) else True,
        is_featured=form.isFeatured.data if provided(form.isFeatured) else False,
        extras=_json_list(form.extras, "extras") or [],
        portions=_json_list(form.portions, "portions") or [],
        image_url=_upload_image(form),
    )
    db.session.add(item)
    db.session.commit()
    return jsonify({"success": True, "data": _menu_item_to_dict(item)}), 201


@menu_bp.route("/items/<int:item_id>", methods=["PUT"])
@admin_required
def update_menu_item(item_id):
    item = _get_menu_item_or_404(item_id)
    form = load_form(MenuItemUpdateForm)
    if not form.validate():
        abort(400, description=first_error(form))

    if provided(form.categoryId):
        _get_category_or_404(form.categoryId.data)
        item.category_id = form.categoryId.data
    if provided(form.name):
        item.name = form.name.data.strip()
    if provided(form.description):
        item.description = form.description.data or None
    if provided(form.price):
        item.price = form.price.data
    if provided(form.originalPrice):
        item.original_price = form.originalPrice.data
    if provided(form.isAvailable):
        item.is_available = form.isAvailable.data
    if provided(form.isFeatured):
        item.is_featured = form.isFeatured.data
    extras = _json_list(form.extras, "extras")
    if extras is not None:
        item.extras = extras
    portions = _json_list(form.portions, "portions")
    if portions is not None:
        item.portions = portions

    # Có ảnh mới: xoá ảnh cũ trên Cloudinary (lỗi thì bỏ qua) rồi dùng ảnh mới
    new_image_url = _upload_image(form)
    if new_image_url:
        if item.image_url:
            delete_image(item.image_url)
        item.image_url = new_image_url

    item.updated_at = datetime.now()
    db.session.commit()
    return jsonify({"success": True, "data": _menu_item_to_dict(item)})


@menu_bp.route("/items/<int:item_id>", methods=["DELETE"])
@admin_required
def delete_menu_item(item_id):
    item = _get_menu_item_or_404(item_id)
    if item.image_url:
        delete_image(item.image_url)
    db.session.delete(item)
    db.session.commit()
    return jsonify({"success": True, "message": "Menu item deleted successfully"})
