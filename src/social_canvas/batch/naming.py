"""Output filename patterns and collision handling.

Patterns are literal strings with two optional tokens:

- ``{idx}``  - 1-based position of the source in the batch
- ``{stem}`` - source file name without directories or extension

Anything else, including unknown ``{tokens}``, is kept verbatim.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from social_canvas.compositing.codec import OUTPUT_EXTENSION

DEFAULT_PATTERN = "{stem}_final"

INDEX_TOKEN = "{idx}"
STEM_TOKEN = "{stem}"


def resolve(pattern: str, index: int, stem: str, extension: str = OUTPUT_EXTENSION) -> str:
    """Expand a naming pattern for one batch item.

    Every occurrence of each token is replaced; the extension is appended
    after substitution. Collisions are not handled here (see deduplicate).

    Args:
        pattern: Naming pattern, e.g. "{stem}_final".
        index: 1-based batch position.
        stem: Source base name without extension.
        extension: Suffix appended to the result, dot included.

    Returns:
        Resolved filename.

    Examples:
        >>> resolve("{stem}_{idx}", 3, "photo")
        'photo_3.jpg'
        >>> resolve("img-{idx}-{size}", 1, "a")
        'img-1-{size}.jpg'
    """
    name = pattern.replace(INDEX_TOKEN, str(index)).replace(STEM_TOKEN, stem)
    return name + extension


def _split_extension(filename: str) -> tuple[str, str]:
    base, dot, ext = filename.rpartition(".")
    if not dot or not base or "/" in ext:
        return filename, ""
    return base, "." + ext


def unique_name(filename: str, taken: Set[str]) -> str:
    """Return `filename`, or the first free `name(n).ext` variant.

    Examples:
        >>> unique_name("a.jpg", {"a.jpg"})
        'a(1).jpg'
        >>> unique_name("a.jpg", {"a.jpg", "a(1).jpg"})
        'a(2).jpg'
    """
    if filename not in taken:
        return filename
    base, ext = _split_extension(filename)
    counter = 1
    while f"{base}({counter}){ext}" in taken:
        counter += 1
    return f"{base}({counter}){ext}"


def deduplicate(filenames: Iterable[str], taken: Optional[Iterable[str]] = None) -> List[str]:
    """Make a sequence of filenames unique, preserving order.

    The first occurrence of a name keeps it; later duplicates get a
    `(n)` suffix before the extension. Names in `taken` (for example
    files already in an output directory) are treated as used.

    Example:
        >>> deduplicate(["a.jpg", "b.jpg", "a.jpg"])
        ['a.jpg', 'b.jpg', 'a(1).jpg']
    """
    used: Set[str] = set(taken or ())
    result: List[str] = []
    for name in filenames:
        unique = unique_name(name, used)
        used.add(unique)
        result.append(unique)
    return result
