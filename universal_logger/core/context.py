"""Context injection and correlation-id extraction"""

from typing import Any, Mapping, Optional

_MISSING = object()


def extract_path(data: Any, path: str, default: Any = None) -> Any:
    """
    Resolve a dotted path such as "request.headers.x-request-id".

    Mapping keys and object attributes are both followed; numeric segments
    index into sequences. Returns default when any segment is missing.
    """
    current = data
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, (list, tuple)) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else _MISSING
        else:
            current = getattr(current, part, _MISSING)
        if current is _MISSING:
            return default
    return current


def merge_metadata(
    metadata: Optional[Mapping[str, Any]],
    context: Optional[Mapping[str, Any]] = None,
    global_metadata: Optional[Mapping[str, Any]] = None,
    correlation_id_path: Optional[str] = None,
) -> dict:
    """
    Merge context, per-call and global metadata.

    Per-call keys override context keys; global keys override both. When
    correlation_id_path is set and resolves to a value, it is stored under
    "correlationId" unless that key is already present.
    """
    merged = dict(context or {})
    merged.update(metadata or {})
    merged.update(global_metadata or {})

    if correlation_id_path and "correlationId" not in merged:
        value = extract_path(merged, correlation_id_path)
        if value is not None:
            merged["correlationId"] = value
    return merged
