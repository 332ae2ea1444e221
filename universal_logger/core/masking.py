"""Sensitive-field masking for record metadata"""

from typing import Any, Iterable, Mapping


def _mask_value(value: Any, names: frozenset, placeholder: str) -> Any:
    if isinstance(value, Mapping):
        return {
            key: placeholder if isinstance(key, str) and key.lower() in names
            else _mask_value(item, names, placeholder)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        # Only mappings inside sequences are walked; primitive items stay as-is.
        items = [
            _mask_value(item, names, placeholder) if isinstance(item, (Mapping, list, tuple)) else item
            for item in value
        ]
        if hasattr(value, "_fields"):
            return type(value)(*items)
        return items if isinstance(value, list) else tuple(items)
    return value


def mask_metadata(
    metadata: Mapping[str, Any],
    field_names: Iterable[str],
    mask_char: str = "*",
    length: int = 8,
) -> dict:
    """
    Replace values of sensitive keys with a fixed-length placeholder.

    Key names are matched case-insensitively at any nesting depth. The
    placeholder has the same length whatever the original value was, so
    nothing about the secret leaks.

    Args:
        metadata: Metadata mapping to mask (not modified)
        field_names: Key names to mask
        mask_char: Placeholder character
        length: Placeholder length

    Returns:
        New dictionary with sensitive values replaced

    Example:
        mask_metadata({"user": "bob", "password": "secret123"}, ["password"])
        # {"user": "bob", "password": "********"}
    """
    names = frozenset(name.lower() for name in field_names)
    if not names or not metadata:
        return dict(metadata or {})
    return _mask_value(metadata, names, mask_char * length)
