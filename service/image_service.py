# service/image_service.py
import logging

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from util.constant import ALLOWED_IMAGE_EXTENSIONS
from util.until import get_cloudinary_public_id

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "hood-eatery/menu"


def init_cloudinary(app):
    cloudinary.config(
        cloud_name=app.config.get("CLOUDINARY_CLOUD_NAME"),
        api_key=app.config.get("CLOUDINARY_API_KEY"),
        api_secret=app.config.get("CLOUDINARY_API_SECRET"),
        secure=True,
    )


def upload_menu_image(file_storage, folder=DEFAULT_FOLDER):
    """Upload ảnh món ăn, giới hạn 800x800, trả về secure_url."""
    result = cloudinary.uploader.upload(
        file_storage.stream,
        folder=folder,
        allowed_formats=ALLOWED_IMAGE_EXTENSIONS,
        transformation=[{"width": 800, "height": 800, "crop": "limit"}],
    )
    logger.info(f"Đã upload ảnh {result.get('public_id')}")
    return result["secure_url"]


def delete_image(image_url):
    """Xoá ảnh cũ trên Cloudinary. Lỗi chỉ log lại, không làm hỏng request."""
    public_id = get_cloudinary_public_id(image_url)
    if not public_id:
        return False
    try:
        cloudinary.uploader.destroy(public_id)
        return True
    except (CloudinaryError, OSError) as e:
        logger.error(f"Error deleting image {public_id} from Cloudinary: {e}")
        return False
