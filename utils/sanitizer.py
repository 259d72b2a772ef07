"""
XSS Prevention / Input Sanitization Module

Sanitizes user input before it is stored and echoed back to the UI shell.
"""

import html
import re

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')


def _escape_within(text, max_length):
    """HTML-escape `text`, keeping whole characters while the result fits in `max_length`."""
    pieces = []
    length = 0
    for char in text:
        piece = html.escape(char)
        if length + len(piece) > max_length:
            break
        pieces.append(piece)
        length += len(piece)
    return ''.join(pieces)


def sanitize_text(text, max_length=10000):
    """
    Sanitize text by HTML-escaping special characters.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Sanitized string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    return _escape_within(text.strip(), max_length)


def sanitize_name(name, max_length=200):
    """
    Sanitize an ingredient, recipe or product name.

    Strips control characters, collapses whitespace and HTML-escapes.
    Returns an empty string when nothing is left, so callers can reject it.
    """
    if not name:
        return ''

    if not isinstance(name, str):
        name = str(name)

    name = _CONTROL_CHARS.sub('', name.strip())
    name = re.sub(r'\s+', ' ', name)

    return _escape_within(name, max_length)


def sanitize_instructions(instructions, max_length=50000):
    """
    Sanitize preparation instructions.

    Preserves newlines for formatting but escapes HTML.
    """
    if not instructions:
        return ''

    if not isinstance(instructions, str):
        instructions = str(instructions)

    instructions = instructions.strip()
    escaped = html.escape(instructions)

    if len(escaped) > max_length:
        escaped = _escape_within(instructions, max_length) + '\n...(truncated)'

    return escaped
