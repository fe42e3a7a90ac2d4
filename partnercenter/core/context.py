"""
Resource addressing.

A ResourceContext is the composite key of one remote resource instance,
e.g. ``("cust-1", "sub-9")`` for a customer's subscription.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from partnercenter.core.errors import InvalidArgument


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class ResourceContext:
    """
    Immutable ordered tuple of identifiers.

    Components may be named (``customer_id``) for error messages and for
    matching against a resource kind; equality only looks at the values.

    Example:
        ctx = ResourceContext("cust-1", "sub-9", names=("customer_id", "subscription_id"))
        ctx.extend("usage_id", "u-1")

    """

    __slots__ = ("_values", "_names")

    def __init__(self, *values: Any, names: Iterable[str] | None = None):
        names = tuple(names) if names is not None else ()
        if not values:
            raise InvalidArgument("A resource context needs at least one identifier")
        if names and len(names) != len(values):
            raise InvalidArgument(f"Got {len(names)} name(s) for {len(values)} identifier(s)")

        for position, value in enumerate(values):
            if _is_blank(value):
                name = names[position] if names else None
                label = name or f"identifier {position}"
                raise InvalidArgument(f"{label} must be set.", name=name, position=position)

        object.__setattr__(self, "_values", tuple(values))
        object.__setattr__(self, "_names", names)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ResourceContext is immutable")

    @property
    def values(self) -> tuple[Any, ...]:
        return self._values

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __getitem__(self, index: int) -> Any:
        return self._values[index]

    def get(self, name: str) -> Any:
        """Get a component by name."""
        try:
            return self._values[self._names.index(name)]
        except ValueError:
            raise KeyError(name) from None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceContext):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        if self._names:
            parts = ", ".join(f"{n}={v!r}" for n, v in zip(self._names, self._values))
        else:
            parts = ", ".join(repr(v) for v in self._values)
        return f"ResourceContext({parts})"

    def extend(self, name: str, value: Any) -> "ResourceContext":
        """Return a new context with one more identifier appended."""
        names = self._names + (name,) if self._names else None
        return ResourceContext(*self._values, value, names=names)

    def truncate(self, length: int) -> "ResourceContext":
        """Return a new context keeping only the first ``length`` identifiers."""
        if not 1 <= length <= len(self._values):
            raise InvalidArgument(f"Cannot truncate a context of {len(self)} to {length}")
        names = self._names[:length] if self._names else None
        return ResourceContext(*self._values[:length], names=names)
