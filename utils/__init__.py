# Utility modules for the confectionery app
from .image_handler import validate_and_process_image, ImageValidationError
from .sanitizer import sanitize_text, sanitize_name, sanitize_instructions
from .numbers import safe_float, safe_int
from .formatting import format_brl
