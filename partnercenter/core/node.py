"""
Resource nodes.

Every resource in the object graph is a ResourceNode: a handle bound to one
ResourceContext, driven by a declarative ResourceKind table that lists its
terminal calls, its cached child accessors and its ``by_id`` indexer.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from partnercenter.core.context import ResourceContext
from partnercenter.core.errors import InvalidArgument

if TYPE_CHECKING:
    from partnercenter.core.client import ServiceClient


# =============================================================================
# Declarative tables
# =============================================================================


@dataclass(frozen=True)
class Call:
    """A terminal operation: one registered operation, one HTTP call."""

    operation: str
    parser: Callable[[Any], Any] | None = None
    # Name of the required payload argument; None for calls without a body
    payload: str | None = None
    required: bool = False


@dataclass(frozen=True)
class Child:
    """A cached child accessor."""

    kind: "ResourceKind"
    # Derives the child's context from the parent's; same context by default
    derive: Callable[[ResourceContext | None], ResourceContext | None] | None = None


@dataclass(frozen=True)
class Item:
    """A ``by_id`` indexer that adds one identifier to the context."""

    kind: "ResourceKind"
    field: str


@dataclass(frozen=True, eq=False)
class ResourceKind:
    """
    Describes one kind of resource node.

    Attributes:
        name: Resource name, used in reprs
        fields: Names of the context components, in order
        calls: Terminal operations by method name
        children: Child accessors by attribute name
        item: Optional indexer for ``by_id``

    """

    name: str
    fields: tuple[str, ...] = ()
    calls: dict[str, Call] = field(default_factory=dict)
    children: dict[str, Child] = field(default_factory=dict)
    item: Item | None = None


# =============================================================================
# Lazy child cache
# =============================================================================


class ChildCache:
    """
    Construct-once cache of child handles.

    The first caller for a key builds the child under the lock and publishes
    it; every later or concurrent caller gets that same instance.
    """

    def __init__(self) -> None:
        self._children: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: str, factory: Callable[[], Any]) -> Any:
        child = self._children.get(key)
        if child is not None:
            return child
        with self._lock:
            child = self._children.get(key)
            if child is None:
                child = factory()
                self._children[key] = child
            return child

    def __contains__(self, key: str) -> bool:
        return key in self._children

    def __len__(self) -> int:
        return len(self._children)


# =============================================================================
# Resource node
# =============================================================================


class ResourceNode:
    """
    Handle on one remote resource.

    Children and calls declared by the node's kind are reachable as
    attributes:

        subscription = client.customers.by_id("cust-1").subscriptions.by_id("sub-9")
        subscription.get()
        subscription.add_ons.get()

    """

    def __init__(self, service: "ServiceClient", kind: ResourceKind, context: ResourceContext | None = None):
        """
        Bind a node to its context.

        Args:
            service: Shared service client used for every call
            kind: Table describing this node's calls and children
            context: Identifiers addressing the resource; None for partner-level nodes

        Raises:
            InvalidArgument: If the context does not match the kind's fields

        """
        given = len(context) if context is not None else 0
        if given != len(kind.fields):
            raise InvalidArgument(f"{kind.name} needs {len(kind.fields)} identifier(s), got {given}")
        if context is not None and context.names and context.names != kind.fields:
            raise InvalidArgument(f"{kind.name} expects {kind.fields}, got {context.names}")

        self._service = service
        self._kind = kind
        self._context = context
        self._children = ChildCache()

    @classmethod
    def bind(cls, service: "ServiceClient", kind: ResourceKind, *identifiers: Any) -> "ResourceNode":
        """Build a node from raw identifiers, validating each one."""
        context = ResourceContext(*identifiers, names=kind.fields) if kind.fields else None
        return cls(service, kind, context)

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    @property
    def context(self) -> ResourceContext | None:
        return self._context

    @property
    def service(self) -> "ServiceClient":
        return self._service

    def __repr__(self) -> str:
        return f"<{self._kind.name} {self._context!r}>"

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        kind = self._kind
        if name in kind.children:
            return self.child(name)
        if name in kind.calls:
            return lambda *args, **kwargs: self.call(name, *args, **kwargs)
        raise AttributeError(f"{kind.name} has no child or operation {name!r}")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._kind.children) | set(self._kind.calls))

    # =========================================================================
    # Navigation
    # =========================================================================

    def child(self, name: str) -> "ResourceNode":
        """
        Get a child handle, building and caching it on first access.

        Raises:
            AttributeError: If the kind declares no such child

        """
        try:
            entry = self._kind.children[name]
        except KeyError:
            raise AttributeError(f"{self._kind.name} has no child {name!r}") from None

        def build() -> ResourceNode:
            context = entry.derive(self._context) if entry.derive else self._context
            return ResourceNode(self._service, entry.kind, context)

        return self._children.get_or_create(name, build)

    def by_id(self, identifier: Any) -> "ResourceNode":
        """
        Get a handle on one item of this collection.

        A fresh handle is built on every call.

        Raises:
            InvalidArgument: If the identifier is empty
            AttributeError: If this node is not indexable

        """
        item = self._kind.item
        if item is None:
            raise AttributeError(f"{self._kind.name} has no items")
        if self._context is None:
            context = ResourceContext(identifier, names=(item.field,))
        else:
            context = self._context.extend(item.field, identifier)
        return ResourceNode(self._service, item.kind, context)

    # =========================================================================
    # Terminal operations
    # =========================================================================

    def call(self, name: str, payload: Any | None = None, /, **params: Any) -> Any:
        """
        Run a terminal operation against the service.

        Args:
            name: Call name from the kind table (e.g. "get", "patch")
            payload: Request body, required for calls that declare one
            **params: Query string parameters

        Raises:
            InvalidArgument: If a required payload is None
            AttributeError: If the kind declares no such call

        """
        try:
            entry = self._kind.calls[name]
        except KeyError:
            raise AttributeError(f"{self._kind.name} has no operation {name!r}") from None

        if entry.payload is not None and payload is None:
            raise InvalidArgument(f"{entry.payload} is required.", name=entry.payload)

        return self._service.invoke(
            entry.operation,
            self._context,
            payload,
            entry.parser,
            required=entry.required,
            params=params or None,
        )
