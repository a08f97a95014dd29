from __future__ import annotations

import re

from tag_catalog.core.models.tag import FALLBACK_CATEGORY, TagCategory

# Substring rules for free-text answers that are not an exact label. Rules are
# checked in taxonomy order, so a text hitting two rules resolves to the
# earlier category.
FUZZY_RULES: tuple[tuple[tuple[str, ...], TagCategory], ...] = (
    (("tempo", "bpm", "time signature"), TagCategory.TEMPO_METER),
    (("time-period", "time period", "decade"), TagCategory.ERA_VIBE),
    (("genre family", "core genre"), TagCategory.CORE_GENRE),
    (("sub-genre", "subgenre", "fusion"), TagCategory.SUB_GENRE),
    (("instrument", "sound source"), TagCategory.INSTRUMENTATION),
    (("vocal",), TagCategory.VOCALS),
    (("mood", "emotion"), TagCategory.MOOD),
    (("production", "mix aesthetic"), TagCategory.PRODUCTION),
    (("rhythm", "structural"), TagCategory.RHYTHM_STRUCTURE),
    (("cultural", "regional"), TagCategory.CULTURAL),
    (("lyrical", "lyrics", "language"), TagCategory.LANGUAGE_LYRICS),
    (("theme", "imagery"), TagCategory.THEMES),
)


def _label_key(text: str) -> str:
    key = re.sub(r"\s+", " ", text.strip().lower())
    key = re.sub(r"\s*/\s*", " / ", key)
    return re.sub(r"\s*&\s*", " & ", key)


_LABEL_LOOKUP: dict[str, TagCategory] = {_label_key(c.value): c for c in TagCategory}


def category_count() -> int:
    return len(TagCategory.ordered())


def numbered_category_list() -> str:
    """Render the taxonomy as ``1. Tempo & Meter`` lines for index-style prompts."""
    return "\n".join(f"{i}. {c.value}" for i, c in enumerate(TagCategory.ordered(), start=1))


def labelled_category_list() -> str:
    """Render the taxonomy as ``- Tempo & Meter`` lines for label-style prompts."""
    return "\n".join(f"- {c.value}" for c in TagCategory.ordered())


def _from_position(position: int) -> TagCategory:
    if 1 <= position <= category_count():
        return TagCategory.from_position(position)
    return FALLBACK_CATEGORY


def _from_text(text: str) -> TagCategory:
    stripped = text.strip()
    if stripped.isascii() and stripped.isdigit():
        digits = stripped.lstrip("0") or "0"
        # int() refuses strings past sys.get_int_max_str_digits()
        if len(digits) > len(str(category_count())):
            return FALLBACK_CATEGORY
        return _from_position(int(digits))

    exact = _LABEL_LOOKUP.get(_label_key(stripped))
    if exact is not None:
        return exact

    lowered = stripped.lower()
    for keywords, category in FUZZY_RULES:
        if any(k in lowered for k in keywords):
            return category
    return FALLBACK_CATEGORY


def normalize_category(raw: object) -> TagCategory:
    """Coerce one raw classifier answer into a taxonomy member.

    Accepts both answer encodings seen from the classifier: a 1-based category
    number, or a category label (exact or loosely worded). Never raises; any
    value that cannot be mapped resolves to ``Miscellaneous / Meta``.

    Examples:
        >>> normalize_category(7)
        <TagCategory.MOOD: 'Mood / Emotion'>
        >>> normalize_category("something lyrical-ish")
        <TagCategory.LANGUAGE_LYRICS: 'Language & Lyrical Context'>
        >>> normalize_category(42)
        <TagCategory.MISC: 'Miscellaneous / Meta'>
    """
    if isinstance(raw, TagCategory):
        return raw
    # bool is an int subclass; True must not mean category 1
    if isinstance(raw, bool):
        return FALLBACK_CATEGORY
    if isinstance(raw, int):
        return _from_position(raw)
    if isinstance(raw, float):
        return _from_position(int(raw)) if raw.is_integer() else FALLBACK_CATEGORY
    if isinstance(raw, str):
        return _from_text(raw)
    return FALLBACK_CATEGORY
