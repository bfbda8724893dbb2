"""Shared field validation helpers."""


def required_text(value: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError("must not be empty")
    return text


def optional_text(value: str | None) -> str | None:
    """Trim; blank strings become None."""
    if value is None:
        return None
    text = value.strip()
    return text or None
