"""Resource-type and status-code predicates over captured messages.

All checks are best-effort heuristics on the ``Content-Type`` header and the
request path extension. Missing headers answer ``False``.
"""

from .models import HttpMessage

IMAGE_EXTENSIONS = frozenset(
    {".avif", ".bmp", ".gif", ".ico", ".jfif", ".jpeg", ".jpg", ".png", ".svg", ".tif",
     ".tiff", ".webp"}
)
FONT_EXTENSIONS = frozenset({".eot", ".otf", ".ttc", ".ttf", ".woff", ".woff2"})
JAVASCRIPT_EXTENSIONS = frozenset({".js", ".mjs", ".cjs"})
CSS_EXTENSIONS = frozenset({".css"})

TEXT_CONTENT_MARKERS = ("text", "html", "xml", "json", "javascript", "js", "yaml")


def _content_type(message: HttpMessage) -> str:
    return (message.response_header("Content-Type") or "").lower()


def _extension(message: HttpMessage) -> str:
    path = message.request.url.path.lower()
    last_segment = path.rsplit("/", 1)[-1]
    if "." not in last_segment:
        return ""
    return "." + last_segment.rsplit(".", 1)[-1]


def is_html(message: HttpMessage) -> bool:
    content_type = _content_type(message)
    return "text/html" in content_type or "application/xhtml" in content_type


def is_javascript(message: HttpMessage) -> bool:
    content_type = _content_type(message)
    if "javascript" in content_type or "ecmascript" in content_type:
        return True
    return _extension(message) in JAVASCRIPT_EXTENSIONS and not is_html(message)


def is_css(message: HttpMessage) -> bool:
    if "text/css" in _content_type(message):
        return True
    return _extension(message) in CSS_EXTENSIONS and not is_html(message)


def is_image(message: HttpMessage) -> bool:
    if _content_type(message).startswith("image/"):
        return True
    return _extension(message) in IMAGE_EXTENSIONS and not is_html(message)


def is_font(message: HttpMessage) -> bool:
    content_type = _content_type(message)
    if content_type.startswith("font/") or "application/font" in content_type:
        return True
    if "application/vnd.ms-fontobject" in content_type:
        return True
    return _extension(message) in FONT_EXTENSIONS and not is_html(message)


def is_json(message: HttpMessage) -> bool:
    return "json" in _content_type(message)


def is_text(message: HttpMessage) -> bool:
    """True for textual content types (HTML, XML, JSON, JS, plain text, YAML)."""
    content_type = _content_type(message)
    if not content_type:
        return False
    return any(marker in content_type for marker in TEXT_CONTENT_MARKERS)


def is_redirect(status_code: int) -> bool:
    return 300 <= status_code < 400


def is_client_error(status_code: int) -> bool:
    return 400 <= status_code < 500


def is_server_error(status_code: int) -> bool:
    return 500 <= status_code < 600


def is_page_200(message: HttpMessage) -> bool:
    """Status 200 with a substantive (non-empty) body."""
    return message.status_code == 200 and len(message.response.content) > 0
