"""
Product Photo Handling

Validates uploaded product photos and re-encodes them through PIL, which
strips metadata and anything hidden after the image data. Every stored
photo is a JPEG named after its product.
"""

import os
from io import BytesIO

from PIL import Image


class ImageValidationError(Exception):
    """Raised when an image fails validation."""
    pass


# PIL format names accepted on upload
ALLOWED_FORMATS = {'JPEG', 'PNG', 'GIF', 'WEBP'}

# Larger source images are refused before decoding
MAX_SOURCE_PIXELS = 4096 * 4096
MAX_FILE_SIZE = 5 * 1024 * 1024

# Stored photos fit in this box
PHOTO_SIZE = (1024, 1024)
JPEG_QUALITY = 85


def photo_filename(product_id):
    return f"product_{product_id}.jpg"


def _read(image_data):
    if isinstance(image_data, bytes):
        return image_data
    image_data.seek(0)
    return image_data.read()


def _flatten(img):
    """RGB copy of `img` with any transparency composited onto white."""
    if img.mode == 'P':
        img = img.convert('RGBA')
    if img.mode in ('RGBA', 'LA'):
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    if img.mode != 'RGB':
        return img.convert('RGB')
    return img


def validate_and_process_image(image_data, output_path, max_size=PHOTO_SIZE):
    """
    Validate an uploaded image and save it as a JPEG.

    Args:
        image_data: Raw image bytes or file-like object (e.g. FileStorage)
        output_path: Where to save; the extension is replaced with .jpg
        max_size: (width, height) box the photo is shrunk to fit

    Returns:
        str: The path actually written

    Raises:
        ImageValidationError: If the image is invalid or potentially malicious
    """
    content = _read(image_data)
    if not content:
        raise ImageValidationError("Empty upload")
    if len(content) > MAX_FILE_SIZE:
        raise ImageValidationError(f"Image too large: {len(content)} bytes (max {MAX_FILE_SIZE})")

    try:
        img = Image.open(BytesIO(content))
        img.verify()

        # verify() leaves the image unusable, open it again
        img = Image.open(BytesIO(content))
        if img.format not in ALLOWED_FORMATS:
            raise ImageValidationError(
                f"Invalid image format: {img.format}. Allowed formats: {', '.join(sorted(ALLOWED_FORMATS))}"
            )

        width, height = img.size
        if width * height > MAX_SOURCE_PIXELS:
            raise ImageValidationError(f"Image dimensions too large: {width}x{height}")

        img = _flatten(img)
        img.thumbnail(max_size, Image.Resampling.LANCZOS)

        output_path = os.path.splitext(output_path)[0] + '.jpg'
        img.save(output_path, 'JPEG', quality=JPEG_QUALITY, optimize=True)
        return output_path

    except ImageValidationError:
        raise
    except Image.DecompressionBombError:
        raise ImageValidationError("Image appears to be a decompression bomb (too large when decoded)")
    except Exception as e:
        raise ImageValidationError(f"Invalid or corrupted image: {str(e)}")


def save_product_photo(image_data, upload_folder, product_id):
    """Validate and store a product's photo; returns the stored filename."""
    os.makedirs(upload_folder, exist_ok=True)
    path = validate_and_process_image(image_data, os.path.join(upload_folder, photo_filename(product_id)))
    return os.path.basename(path)


def remove_photo(upload_folder, filename):
    """Delete a stored photo if it exists."""
    if not filename:
        return
    path = os.path.join(upload_folder, filename)
    if os.path.exists(path):
        os.remove(path)
