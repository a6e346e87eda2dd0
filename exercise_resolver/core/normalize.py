import re

_SEPARATORS = re.compile(r"[-_/]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(text: str) -> str:
    """Lower-case, turn separators into spaces and collapse whitespace."""
    t = text.lower()
    t = _SEPARATORS.sub(" ", t)
    t = _WHITESPACE.sub(" ", t)
    return t.strip()


def display_name(text: str) -> str:
    """Readable form of the caller's input; keeps case, drops underscores."""
    t = text.replace("_", " ")
    return _WHITESPACE.sub(" ", t).strip()


def exercise_id_from_name(text: str) -> str:
    """Stable identifier derived from the normalized name."""
    return normalize_name(text).replace(" ", "_")
