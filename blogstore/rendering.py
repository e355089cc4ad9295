import bleach
import markdown

ALLOWED_TAGS = [
    "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li",
    "strong", "em", "b", "i", "u",
    "blockquote", "hr", "br",
    "a", "img",
    "pre", "code",
    "table", "thead", "tbody", "tr", "th", "td",
]
ALLOWED_ATTRS = {
    "*": ["class"],
    "a": ["href", "title", "rel"],
    "img": ["src", "alt", "title"],
}
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

_EXTENSIONS = ["fenced_code", "tables"]


def render_markdown(markdown_text: str | None) -> str:
    """Render *markdown_text* to sanitised HTML.  ``None`` or ``""`` gives ``""``."""
    if not markdown_text:
        return ""
    html = markdown.markdown(markdown_text, extensions=_EXTENSIONS)
    return bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
