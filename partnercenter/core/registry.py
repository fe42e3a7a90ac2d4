"""
Operation registry.

Maps logical operation names (``GetSubscription``) to an HTTP verb and a path
template with positional placeholders (``/customers/{0}/subscriptions/{1}``).
The default registry is loaded once from ``operations.json`` and is
read-only afterwards.
"""

import json
import logging
import os
import string
import threading
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any
from urllib.parse import quote

from partnercenter.core.errors import InvalidArgument, TemplateArityMismatch, UnknownOperation

logger = logging.getLogger(__name__)

VERBS = ("GET", "POST", "PATCH", "PUT", "DELETE")

# Verbs that never carry a request body
BODYLESS_VERBS = frozenset({"GET", "DELETE"})

DEFAULT_OPERATIONS_FILE = Path(__file__).with_name("operations.json")

_formatter = string.Formatter()


def _placeholder_indexes(template: str) -> list[int]:
    indexes = []
    for _, field_name, format_spec, conversion in _formatter.parse(template):
        if field_name is None:
            continue
        if not field_name.isdigit() or format_spec or conversion:
            raise InvalidArgument(f"Path template {template!r} has a non-positional placeholder {{{field_name}}}")
        indexes.append(int(field_name))
    return indexes


@dataclass(frozen=True)
class OperationDescriptor:
    """How to invoke one named remote operation."""

    name: str
    verb: str
    path_template: str
    arity: int = field(init=False)

    def __post_init__(self) -> None:
        verb = self.verb.upper()
        if verb not in VERBS:
            raise InvalidArgument(f"Operation {self.name} has unsupported verb {self.verb!r}")
        object.__setattr__(self, "verb", verb)

        indexes = sorted(set(_placeholder_indexes(self.path_template)))
        if indexes != list(range(len(indexes))):
            raise InvalidArgument(f"Operation {self.name} has gaps in its placeholders: {self.path_template!r}")
        object.__setattr__(self, "arity", len(indexes))

    def expand(self, values: Sequence[Any]) -> str:
        """
        Substitute values into the path template, left to right.

        Each value is URL-escaped on its own, so reserved characters in an
        identifier never spill into neighbouring path segments.

        Raises:
            TemplateArityMismatch: If the value count differs from the placeholder count

        """
        if len(values) != self.arity:
            raise TemplateArityMismatch(self.name, self.arity, len(values))
        escaped = [quote(str(value), safe="") for value in values]
        return self.path_template.format(*escaped)


class OperationRegistry(Mapping[str, OperationDescriptor]):
    """Read-only mapping of operation name to descriptor."""

    def __init__(self, descriptors: Mapping[str, OperationDescriptor] | None = None):
        self._descriptors = MappingProxyType(dict(descriptors or {}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OperationRegistry":
        """
        Build a registry from its JSON form.

        Accepts ``{"operations": {name: {"verb": ..., "path": ...}}}`` or the
        bare inner mapping.
        """
        operations = data.get("operations", data)
        if not isinstance(operations, Mapping):
            raise InvalidArgument("Operation registry must be a mapping of name to {verb, path}")

        descriptors = {}
        for name, entry in operations.items():
            if not isinstance(entry, Mapping) or "verb" not in entry or "path" not in entry:
                raise InvalidArgument(f"Operation {name} needs both 'verb' and 'path'")
            descriptors[name] = OperationDescriptor(name=name, verb=entry["verb"], path_template=entry["path"])
        return cls(descriptors)

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> "OperationRegistry":
        """Load a registry from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidArgument(f"Invalid operation registry {path}: {e}") from e
        registry = cls.from_dict(data)
        logger.debug("Loaded %d operations from %s", len(registry), path)
        return registry

    def descriptor_for(self, name: str) -> OperationDescriptor:
        """
        Look up an operation by name.

        Raises:
            UnknownOperation: If no operation has this name

        """
        try:
            return self._descriptors[name]
        except KeyError:
            raise UnknownOperation(name) from None

    def __getitem__(self, name: str) -> OperationDescriptor:
        return self._descriptors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"OperationRegistry({len(self)} operations)"


# =============================================================================
# Process-wide default
# =============================================================================


_default_registry: OperationRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> OperationRegistry:
    """
    Get the process-wide registry, loading it on first use.

    The file named by PARTNER_CENTER_OPERATIONS_FILE replaces the packaged
    operations.json when set.
    """
    global _default_registry
    registry = _default_registry
    if registry is not None:
        return registry
    with _default_lock:
        if _default_registry is None:
            path = os.environ.get("PARTNER_CENTER_OPERATIONS_FILE") or DEFAULT_OPERATIONS_FILE
            _default_registry = OperationRegistry.from_file(path)
        return _default_registry
