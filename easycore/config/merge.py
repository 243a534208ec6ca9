"""
Configuration merging - structural merge of nested settings.

Produces an effective configuration from defaults and overrides. Only plain
mappings and lists are traversed; every other value is opaque and is assigned
by reference.
"""

from __future__ import annotations

import collections
from collections.abc import Mapping, MutableMapping
from typing import Any


class _Missing:
    """Marker for "no value", distinct from ``None``."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

# dict types that are created as bare records
_PLAIN_DICT_TYPES = (dict, collections.OrderedDict, collections.defaultdict)

_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes, bytearray)


def is_namespace(obj: Any) -> bool:
    """Check whether ``obj`` is an execution namespace such as ``globals()``."""
    return isinstance(obj, dict) and "__builtins__" in obj and "__name__" in obj


def is_plain_object(obj: Any) -> bool:
    """
    Check whether ``obj`` is a plain mapping that merging may recurse into.

    Not plain:
    - anything that is not a dict (mapping proxies, ``os.environ``, objects)
    - dict subclasses defined outside ``collections``
    - execution namespaces (module globals)
    """
    if type(obj) not in _PLAIN_DICT_TYPES:
        return False
    return not is_namespace(obj)


def is_object(obj: Any) -> bool:
    """Check whether ``obj`` is a non-primitive value."""
    return obj is not MISSING and not isinstance(obj, _PRIMITIVES)


def get_type(obj: Any) -> str:
    """Get a short lowercase kind name for ``obj``."""
    if obj is MISSING:
        return "missing"
    if obj is None:
        return "none"
    if isinstance(obj, bool):
        return "bool"
    if isinstance(obj, int):
        return "int"
    if isinstance(obj, float):
        return "float"
    if isinstance(obj, str):
        return "str"
    if isinstance(obj, (bytes, bytearray)):
        return "bytes"
    if isinstance(obj, list):
        return "list"
    if isinstance(obj, tuple):
        return "tuple"
    if isinstance(obj, Mapping):
        return "dict"
    if isinstance(obj, type):
        return "class"
    if callable(obj):
        return "function"
    return "object"


def merge(*args: Any) -> Any:
    """
    Merge sources onto a target and return the target.

    Call as ``merge(target, *sources)`` or ``merge(deep, target, *sources)``.
    A target that cannot receive keys or attributes is replaced by a new
    dict. In deep mode plain mappings are merged recursively and lists are
    replaced by deep copies. ``MISSING`` values are skipped; ``None`` is
    a value like any other.
    """
    if not args:
        return {}

    deep = False
    target = args[0]
    sources = args[1:]

    if isinstance(target, bool):
        deep = target
        target = args[1] if len(args) > 1 else {}
        sources = args[2:]

    if not _is_writable(target):
        target = {}

    # ids of sources currently being merged, for cycle avoidance
    active: set[int] = set()
    for source in sources:
        _merge_source(target, source, deep, active)

    return target


def deep_merge(target: Any, *sources: Any) -> Any:
    """Shorthand for ``merge(True, target, *sources)``."""
    return merge(True, target, *sources)


def _is_writable(target: Any) -> bool:
    if isinstance(target, MutableMapping):
        return True
    if isinstance(target, _PRIMITIVES) or target is MISSING:
        return False
    return hasattr(target, "__dict__")


def _own_items(source: Any) -> list[tuple[Any, Any]]:
    if isinstance(source, Mapping):
        return list(source.items())
    if isinstance(source, _PRIMITIVES) or source is MISSING:
        return []
    if hasattr(source, "__dict__"):
        return list(vars(source).items())
    return []


def _lookup(target: Any, key: Any) -> Any:
    if isinstance(target, Mapping):
        return target.get(key, MISSING)
    return getattr(target, key, MISSING)


def _assign(target: Any, key: Any, value: Any) -> None:
    if isinstance(target, MutableMapping):
        target[key] = value
    else:
        setattr(target, key, value)


def _merge_source(target: Any, source: Any, deep: bool, active: set[int]) -> None:
    if source is None or source is MISSING:
        return

    active.add(id(source))
    try:
        for key, copy in _own_items(source):
            # prevent never-ending loop
            if copy is target:
                continue

            if deep and is_plain_object(copy) and id(copy) not in active:
                current = _lookup(target, key)
                clone = current if is_plain_object(current) else {}
                _merge_source(clone, copy, deep, active)
                _assign(target, key, clone)
            elif deep and isinstance(copy, list) and id(copy) not in active:
                _assign(target, key, _clone_list(copy, active))
            elif copy is not MISSING:
                _assign(target, key, copy)
    finally:
        active.discard(id(source))


def _clone_list(items: list[Any], active: set[int]) -> list[Any]:
    active.add(id(items))
    try:
        result: list[Any] = []
        for item in items:
            if is_plain_object(item) and id(item) not in active:
                clone: dict[Any, Any] = {}
                _merge_source(clone, item, True, active)
                result.append(clone)
            elif isinstance(item, list) and id(item) not in active:
                result.append(_clone_list(item, active))
            else:
                result.append(item)
        return result
    finally:
        active.discard(id(items))
