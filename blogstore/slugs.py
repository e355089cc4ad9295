import re
import unicodedata

_NON_SLUG_RE = re.compile(r"[^A-Za-z0-9\s-]")
_SEPARATOR_RE = re.compile(r"[\s-]+")


def to_slug(text: str | None) -> str:
    """
    Return a URL-safe, lowercase, hyphenated slug derived from *text*.

    Accents are removed by decomposing (NFD) and dropping combining marks,
    so ``"Café Time"`` becomes ``"cafe-time"``.  Hyphens count as word
    separators, which keeps ``to_slug`` idempotent.  Never raises; ``None``
    or an empty string yields ``""``.  Distinct inputs may collide
    (``"Go!"`` and ``"Go?"``); uniqueness is the registry's concern.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    without_marks = "".join(
        ch for ch in decomposed if not unicodedata.category(ch).startswith("M")
    )
    alphanumeric = _NON_SLUG_RE.sub("", without_marks)
    return _SEPARATOR_RE.sub("-", alphanumeric).strip("-").lower()
