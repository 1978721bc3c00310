"""Structural type signatures for JSON documents.

Reduces a JSON value to a flat mapping of structural path to type tag:
- Object fields are addressed as ``parent.key``
- Array elements collapse onto ``parent[]`` (only the first element is inspected)
- The document root is addressed as ``root``

Recursion depth follows document depth; bounding it is the caller's concern.
"""

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

ROOT_PATH = "root"


class TypeTag(Enum):
    """Structural classification of a single JSON location."""

    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


class TypeSignature(Mapping[str, TypeTag]):
    """Read-only mapping of structural path to type tag.

    Iteration follows the order in which paths were discovered.
    """

    __slots__ = ("_types",)

    def __init__(self, types: Mapping[str, TypeTag] | None = None) -> None:
        self._types: dict[str, TypeTag] = dict(types or {})

    def __getitem__(self, path: str) -> TypeTag:
        return self._types[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        inner = ", ".join(f"{path!r}: {tag.value}" for path, tag in self._types.items())
        return f"TypeSignature({{{inner}}})"

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain ``path -> tag name`` dictionary."""
        return {path: tag.value for path, tag in self._types.items()}


def scalar_tag(value: Any, path: str = ROOT_PATH) -> TypeTag:
    """Classify a JSON scalar.

    Raises:
        TypeError: If the value is not a JSON scalar
    """
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, (int, float)):
        return TypeTag.NUMBER
    if isinstance(value, str):
        return TypeTag.STRING
    raise TypeError(f"Unsupported JSON value at '{path}': {type(value).__name__}")


def extract(value: Any) -> TypeSignature:
    """Extract the type signature of a JSON value.

    Args:
        value: Parsed JSON document (dict, list, str, int, float, bool or None)

    Returns:
        TypeSignature keyed by structural path

    Raises:
        TypeError: If the document contains a non-JSON value
    """
    types: dict[str, TypeTag] = {}
    _collect(value, "", types)
    return TypeSignature(types)


def _collect(value: Any, prefix: str, types: dict[str, TypeTag]) -> None:
    """Record the tag for ``value`` and descend into its children."""
    path = prefix or ROOT_PATH

    if value is None:
        types[path] = TypeTag.NULL
        return

    if isinstance(value, list):
        types[path] = TypeTag.ARRAY
        if value:
            _collect(value[0], f"{prefix}[]", types)
        return

    if isinstance(value, dict):
        types[path] = TypeTag.OBJECT
        for key, child in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Unsupported object key at '{path}': {type(key).__name__}")
            _collect(child, f"{prefix}.{key}" if prefix else key, types)
        return

    types[path] = scalar_tag(value, path)
