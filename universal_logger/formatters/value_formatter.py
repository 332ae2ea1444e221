"""
Value formatter for metadata rendering

Renders arbitrary runtime values into readable, possibly multi-line text.
Rendering never raises: anything that cannot be rendered becomes a
bracketed type tag such as "[lock]".

Values are classified into a closed set of kinds and dispatched through an
ordered rule table. Order matters: exceptions must be matched before plain
objects, binary arrays before generic buffers, and so on.
"""

from __future__ import annotations

import array
import asyncio
import concurrent.futures
import dataclasses
import functools
import inspect
import io
import ipaddress
import json
import math
import mmap
import re
import socket
import sys
import threading
import traceback
import types
import uuid
import weakref
from collections.abc import Mapping, Set as AbstractSet
from contextlib import contextmanager
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any, Callable, List, NamedTuple, Optional
from urllib.parse import ParseResult, ParseResultBytes, SplitResult, SplitResultBytes

# Continuation indent for multi-line blocks (maps, sets, arrays, objects)
INDENT = "    "
# Continuation indent for stack trace lines
ERROR_INDENT = "      "


class ValueKind(Enum):
    """Renderable value kinds."""

    SCALAR = "scalar"          # null, primitives, dates, patterns, URLs
    STRUCTURED = "structured"  # maps, sets, arrays, objects
    BINARY = "binary"          # typed arrays and raw buffers
    OPAQUE = "opaque"          # functions, futures, weak containers, handles
    CUSTOM = "custom"          # exceptions and objects with their own __str__


class _Undefined:
    """Marker for a value that was never set."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()

_state = threading.local()


@contextmanager
def _visiting(value: Any):
    """Yield False when value is already being rendered higher up the stack."""
    active = getattr(_state, "active", None)
    if active is None:
        active = _state.active = set()
    key = id(value)
    if key in active:
        yield False
        return
    active.add(key)
    try:
        yield True
    finally:
        active.discard(key)


def _type_name(value: Any) -> str:
    return type(value).__name__


def _block(name: str, entries: List[str]) -> str:
    if not entries:
        return f"{name}(0)"
    body = f",\n{INDENT}".join(entries)
    return f"{name}(\n{INDENT}{body}\n  )"


def _reindent(text: str) -> str:
    return f"\n{INDENT}".join(line.rstrip() for line in text.split("\n"))


# ---------------------------------------------------------------------------
# Type probes
# ---------------------------------------------------------------------------

_PRIMITIVES = (str, int, float, complex, bool, Decimal, Fraction, Enum)
_WEAK_TYPES = (
    weakref.WeakKeyDictionary,
    weakref.WeakValueDictionary,
    weakref.WeakSet,
    weakref.ref,
)
_ASYNC_TYPES = (
    asyncio.Future,
    concurrent.futures.Future,
    types.CoroutineType,
    types.GeneratorType,
    types.AsyncGeneratorType,
)
_URL_TYPES = (ParseResult, SplitResult, ParseResultBytes, SplitResultBytes)
_STRINGY_TYPES = (
    PurePath,
    uuid.UUID,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
)


def _is_function(value: Any) -> bool:
    return inspect.isroutine(value) or isinstance(value, (type, functools.partial))


def _is_error(value: Any) -> bool:
    return isinstance(value, BaseException)


def _error_text(error: BaseException) -> str:
    if error.__traceback__ is not None:
        lines = traceback.format_exception(type(error), error, error.__traceback__)
    else:
        lines = traceback.format_exception_only(type(error), error)
    return "".join(lines).rstrip("\n")


def _is_plain_dict(value: Any) -> bool:
    return type(value) is dict and all(isinstance(key, str) for key in value)


def _typed_array_name(value: Any) -> Optional[str]:
    """Name for fixed-width numeric arrays, or None if value is not one."""
    if isinstance(value, array.array):
        code = value.typecode
        if code in ("u", "w"):
            return None
        if code in ("f", "d"):
            return f"Float{value.itemsize * 8}Array"
        sign = "Int" if code.islower() else "Uint"
        return f"{sign}{value.itemsize * 8}Array"

    numpy = sys.modules.get("numpy")
    ndarray = getattr(numpy, "ndarray", None)
    if ndarray is not None and isinstance(value, ndarray):
        if value.ndim == 1 and value.dtype.kind in "biuf":
            return f"{value.dtype.name.capitalize()}Array"
    return None


def _is_buffer(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray, memoryview, array.array, mmap.mmap)):
        return True
    numpy = sys.modules.get("numpy")
    ndarray = getattr(numpy, "ndarray", None)
    return ndarray is not None and isinstance(value, ndarray)


def _buffer_size(value: Any) -> int:
    if isinstance(value, memoryview):
        return value.nbytes
    if isinstance(value, array.array):
        return len(value) * value.itemsize
    nbytes = getattr(value, "nbytes", None)
    if isinstance(nbytes, int):
        return nbytes
    return len(value)


def _object_fields(value: Any) -> Optional[dict]:
    """Public attributes of a plain object, or None if it has none to show."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    attributes = getattr(value, "__dict__", None)
    if isinstance(attributes, dict):
        return {k: v for k, v in attributes.items() if not k.startswith("_")}
    slots = getattr(type(value), "__slots__", None)
    if slots:
        if isinstance(slots, str):
            slots = (slots,)
        return {
            name: getattr(value, name)
            for name in slots
            if not name.startswith("_") and hasattr(value, name)
        }
    return None


def _has_custom_str(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def _is_object(value: Any) -> bool:
    """Anything that is not a primitive, None or a callable definition."""
    return not (
        value is None
        or value is UNDEFINED
        or isinstance(value, _PRIMITIVES)
        or _is_function(value)
    )


# ---------------------------------------------------------------------------
# JSON conversion for arrays and objects
# ---------------------------------------------------------------------------

# Above this many bits an int may exceed the interpreter's int-to-str digit limit
_LARGE_INT_BITS = 14000


def _json_number(value: Any) -> Any:
    """Numbers JSON can carry; NaN and infinities become null, huge ints text."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, int) and not isinstance(value, bool) and value.bit_length() > _LARGE_INT_BITS:
        return _int_text(value)
    return value


def _int_text(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        return f"[int: {value.bit_length()} bits]"


def _json_key(key: Any) -> Any:
    if isinstance(key, (str, bool)) or key is None:
        return key
    if isinstance(key, (int, float)):
        number = _json_number(key)
        return render(key) if number is None else number
    return render(key)


def to_jsonable(value: Any, seen: frozenset = frozenset()) -> Any:
    """
    Convert a value into something json.dumps accepts.

    Functions become "[Function]", exceptions their traceback text and
    patterns their repr. Values with no JSON shape are rendered as text.
    """
    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, (int, float)):
        return _json_number(value)
    if value is UNDEFINED:
        return None
    if isinstance(value, BaseException):
        return _error_text(value)
    if isinstance(value, re.Pattern):
        return repr(value)
    if _is_function(value):
        return "[Function]"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, Fraction, complex, Enum)):
        return render(value)

    marker = id(value)
    if marker in seen:
        return "[Circular]"
    seen = seen | {marker}

    if _host_renderer(value) is None:
        if isinstance(value, Mapping) and not isinstance(value, _WEAK_TYPES):
            return {_json_key(k): to_jsonable(v, seen) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [to_jsonable(item, seen) for item in value]
        if not _has_custom_str(value) and not _is_buffer(value) and not isinstance(
            value, _WEAK_TYPES + _ASYNC_TYPES + _URL_TYPES + _STRINGY_TYPES
        ):
            attributes = _object_fields(value)
            if attributes is not None:
                return {k: to_jsonable(v, seen) for k, v in attributes.items()}
    return render(value)


def _pretty_json(value: Any) -> str:
    return json.dumps(to_jsonable(value), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Host-environment shapes (sockets, files, events, form data)
# ---------------------------------------------------------------------------

def _render_socket(sock: socket.socket) -> str:
    if sock.fileno() == -1:
        return "socket(closed)"
    try:
        address = sock.getsockname()
    except OSError:
        address = "unbound"
    return f"socket({sock.family.name}, {address})"


def _render_stream(stream: io.IOBase) -> str:
    name = _type_name(stream)
    if isinstance(stream, io.BytesIO):
        if stream.closed:
            return f"{name}(closed)"
        return f"{name}({len(stream.getvalue())} bytes)"
    if stream.closed:
        return f"{name}(closed)"
    parts = [str(getattr(stream, attr)) for attr in ("name", "mode") if hasattr(stream, attr)]
    if not parts:
        return f"[{name}]"
    return f"{name}({', '.join(parts)})"


def _render_event(event: Any) -> str:
    return f"Event(set={event.is_set()})"


def _file_summary(filename: Any, content_type: Any, size: Any) -> str:
    size_str = f"{size} bytes" if size is not None else "unknown size"
    return f"File({filename}, {content_type or 'unknown type'}, {size_str})"


def _render_form(items) -> str:
    entries = []
    for key, item in items:
        upload = _host_upload_summary(item)
        entries.append(f"{key}: {upload if upload is not None else item}")
    return _block("FormData", entries)


def _host_upload_summary(value: Any) -> Optional[str]:
    werkzeug = sys.modules.get("werkzeug.datastructures")
    storage_cls = getattr(werkzeug, "FileStorage", None)
    if storage_cls is not None and isinstance(value, storage_cls):
        return _file_summary(value.filename, value.content_type, value.content_length or None)

    starlette = sys.modules.get("starlette.datastructures")
    upload_cls = getattr(starlette, "UploadFile", None)
    if upload_cls is not None and isinstance(value, upload_cls):
        return _file_summary(value.filename, value.content_type, getattr(value, "size", None))
    return None


def _host_renderer(value: Any) -> Optional[Callable[[Any], str]]:
    """
    Pick a renderer for host-environment values.

    Optional web frameworks are only probed when already imported, so their
    absence never costs an import or raises.
    """
    if isinstance(value, socket.socket):
        return _render_socket
    if isinstance(value, io.IOBase):
        return _render_stream
    if isinstance(value, (threading.Event, asyncio.Event)):
        return _render_event
    if _host_upload_summary(value) is not None:
        return _host_upload_summary

    werkzeug = sys.modules.get("werkzeug.datastructures")
    multidict_cls = getattr(werkzeug, "MultiDict", None)
    if multidict_cls is not None and isinstance(value, multidict_cls):
        return lambda form: _render_form(form.items(multi=True))

    starlette = sys.modules.get("starlette.datastructures")
    query_cls = getattr(starlette, "QueryParams", None)
    if query_cls is not None and isinstance(value, query_cls):
        return lambda params: f"QueryParams({params})"
    form_cls = getattr(starlette, "FormData", None)
    if form_cls is not None and isinstance(value, form_cls):
        return lambda form: _render_form(form.multi_items())
    return None


# ---------------------------------------------------------------------------
# Rule renderers
# ---------------------------------------------------------------------------

def _render_nullish(value: Any) -> str:
    return "null" if value is None else "undefined"


def _render_error(error: BaseException) -> str:
    lines = [line.strip() for line in _error_text(error).split("\n")]
    return f"\n{ERROR_INDENT}".join(lines)


def _render_special(value: Any) -> str:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return repr(value)
    if isinstance(value, _URL_TYPES):
        url = value.geturl()
        return url.decode("utf-8", "replace") if isinstance(url, bytes) else url
    return str(value)


def _render_map(value: Mapping) -> str:
    with _visiting(value) as fresh:
        if not fresh:
            return "[Circular Map]"
        return _block("Map", [f"{render(k)} => {render(v)}" for k, v in value.items()])


def _render_set(value: AbstractSet) -> str:
    with _visiting(value) as fresh:
        if not fresh:
            return "[Circular Set]"
        return _block("Set", [render(item) for item in value])


def _render_opaque(value: Any) -> str:
    return f"[{_type_name(value)}]"


def _render_typed_array(value: Any) -> str:
    items = value.tolist()
    return f"{_typed_array_name(value)}({', '.join(str(item) for item in items)})"


def _render_buffer(value: Any) -> str:
    return f"{_type_name(value)}({_buffer_size(value)})"


def _render_host(value: Any) -> str:
    return _host_renderer(value)(value)


def _render_array(value: Any) -> str:
    if len(value) == 0:
        return "[]"
    with _visiting(value) as fresh:
        if not fresh:
            return "[Circular]"
        return _reindent(_pretty_json(value))


def _render_custom_str(value: Any) -> str:
    return str(value)


def _render_object(value: Any) -> str:
    with _visiting(value) as fresh:
        if not fresh:
            return "[Circular]"
        converted = to_jsonable(value)
        if isinstance(converted, str):
            return converted
        if not converted:
            return "{}"
        return _reindent(json.dumps(converted, indent=2, ensure_ascii=False))


def _render_function(value: Any) -> str:
    name = getattr(value, "__name__", "")
    if not name or name == "<lambda>":
        return "[Function: anonymous]"
    return f"[Function: {name}]"


def _render_primitive(value: Any) -> str:
    if isinstance(value, Enum):
        return f"{_type_name(value)}.{value.name}"
    if isinstance(value, (Decimal, Fraction, complex)):
        return str(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return _int_text(value)
    return json.dumps(value, ensure_ascii=False)


class _Rule(NamedTuple):
    kind: ValueKind
    matches: Callable[[Any], bool]
    render: Callable[[Any], str]


_RULES = (
    _Rule(ValueKind.SCALAR, lambda v: v is None or v is UNDEFINED, _render_nullish),
    _Rule(ValueKind.CUSTOM, _is_error, _render_error),
    _Rule(
        ValueKind.SCALAR,
        lambda v: isinstance(v, (datetime, date, time, re.Pattern) + _URL_TYPES + _STRINGY_TYPES),
        _render_special,
    ),
    _Rule(
        ValueKind.STRUCTURED,
        lambda v: isinstance(v, Mapping)
        and not _is_plain_dict(v)
        and not isinstance(v, _WEAK_TYPES)
        and _host_renderer(v) is None,
        _render_map,
    ),
    _Rule(
        ValueKind.STRUCTURED,
        lambda v: isinstance(v, AbstractSet) and not isinstance(v, _WEAK_TYPES),
        _render_set,
    ),
    _Rule(
        ValueKind.OPAQUE,
        lambda v: isinstance(v, _WEAK_TYPES + _ASYNC_TYPES) or inspect.isawaitable(v),
        _render_opaque,
    ),
    _Rule(ValueKind.BINARY, lambda v: _typed_array_name(v) is not None, _render_typed_array),
    _Rule(ValueKind.BINARY, _is_buffer, _render_buffer),
    _Rule(ValueKind.OPAQUE, lambda v: _host_renderer(v) is not None, _render_host),
    _Rule(ValueKind.STRUCTURED, lambda v: isinstance(v, (list, tuple)), _render_array),
    _Rule(
        ValueKind.CUSTOM,
        lambda v: _is_object(v) and not isinstance(v, dict) and _has_custom_str(v),
        _render_custom_str,
    ),
    _Rule(
        ValueKind.STRUCTURED,
        lambda v: isinstance(v, dict) or (_is_object(v) and _object_fields(v) is not None),
        _render_object,
    ),
    _Rule(ValueKind.OPAQUE, _is_function, _render_function),
    _Rule(ValueKind.SCALAR, lambda v: isinstance(v, _PRIMITIVES), _render_primitive),
)


def _match(value: Any) -> Optional[_Rule]:
    for rule in _RULES:
        if rule.matches(value):
            return rule
    return None


def classify(value: Any) -> ValueKind:
    """
    Return the kind a value renders as.

    Args:
        value: Any runtime value

    Returns:
        ValueKind of the first matching rule (OPAQUE if none match)
    """
    try:
        rule = _match(value)
    except Exception:
        return ValueKind.OPAQUE
    return rule.kind if rule else ValueKind.OPAQUE


def render(value: Any) -> str:
    """
    Render a value as readable text.

    Args:
        value: Any runtime value

    Returns:
        Rendered string; never raises

    Example:
        render(None)                      # 'null'
        render(set())                     # 'Set(0)'
        render(array.array("i", [1, 2]))  # 'Int32Array(1, 2)'
        render(len)                       # '[Function: len]'
    """
    try:
        rule = _match(value)
        if rule is not None:
            return rule.render(value)
        return f"[{_type_name(value)}]"
    except Exception:
        return f"[{_type_name(value)}]"
