"""Greedy word wrapping for the summary overlay."""

from collections.abc import Callable

from app.services.redaction.models import RenderedField

WidthFn = Callable[[str], float]


def wrap(text: str | None, max_width: float, width_fn: WidthFn) -> list[str]:
    """Wrap text into lines no wider than max_width.

    Words are never split: a single word wider than max_width is emitted
    on its own line. Empty or missing text returns an empty list.

    Args:
        text: Text to wrap
        max_width: Available width in points
        width_fn: Measures the rendered width of a candidate line

    Returns:
        Lines in order
    """
    if not text:
        return []

    words = text.split()
    if not words:
        return []

    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if width_fn(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def layout_field(
    label: str,
    value: str | None,
    max_width: float,
    width_fn: WidthFn,
    placeholder: str,
) -> RenderedField:
    """Wrap one field value, substituting the placeholder when it is empty."""
    lines = wrap(value, max_width, width_fn)
    return RenderedField(label=label, lines=lines or [placeholder])
