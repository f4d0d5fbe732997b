"""
Primitive Sets

The materialized form of a keyset: one live primitive per enabled key,
indexed by output prefix, with exactly one entry flagged primary. Built once
per :meth:`KeysetHandle.primitives` call and read-only afterwards, so a set
can be shared across threads performing sign/verify concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from keymesh.core.output_prefix import RAW_PREFIX, output_prefix
from keymesh.exceptions import InvalidArgumentError, KeyMeshError
from keymesh.models import Key, KeyStatus, OutputPrefixType

logger = logging.getLogger(__name__)

P = TypeVar("P")
R = TypeVar("R")


@dataclass(frozen=True)
class Entry(Generic[P]):
    """A live primitive together with the key metadata it came from."""

    primitive: P
    key_id: int
    identifier: bytes
    status: KeyStatus
    output_prefix_type: OutputPrefixType
    is_primary: bool = False


class PrimitiveSet(Generic[P]):
    """Primitives of one kind, keyed by output prefix.

    Args:
        primitive_class: The primitive interface every entry implements.

    Example:
        >>> pset = PrimitiveSet(PublicKeySign)
        >>> entry = pset.add_primitive(signer, key, is_primary=True)
        >>> pset.primary is entry
        True
    """

    def __init__(self, primitive_class: type) -> None:
        self._primitive_class = primitive_class
        self._primitives: dict[bytes, list[Entry[P]]] = {}
        self._entries: list[Entry[P]] = []
        self._primary: Optional[Entry[P]] = None

    @property
    def primitive_class(self) -> type:
        return self._primitive_class

    @property
    def primary(self) -> Entry[P]:
        """The primary entry.

        Raises:
            InvalidArgumentError: If no primary has been added.
        """
        if self._primary is None:
            raise InvalidArgumentError("primitive set has no primary")
        return self._primary

    def add_primitive(self, primitive: P, key: Key, is_primary: bool = False) -> Entry[P]:
        """Add the primitive built from *key*.

        Args:
            primitive: Instance of :attr:`primitive_class`.
            key: The key record the primitive was built from.
            is_primary: Whether this entry is the set's primary.

        Returns:
            The stored entry.

        Raises:
            InvalidArgumentError: If the primitive has the wrong type, the key
                is not enabled, or a primary already exists.
        """
        if not isinstance(primitive, self._primitive_class):
            raise InvalidArgumentError(
                f"primitive {type(primitive).__name__} is not a {self._primitive_class.__name__}"
            )
        if key.status != KeyStatus.ENABLED:
            raise InvalidArgumentError(f"key {key.key_id} is not enabled")
        if is_primary and self._primary is not None:
            raise InvalidArgumentError("primitive set already has a primary")

        entry: Entry[P] = Entry(
            primitive=primitive,
            key_id=key.key_id,
            identifier=output_prefix(key),
            status=key.status,
            output_prefix_type=key.output_prefix_type,
            is_primary=is_primary,
        )
        self._primitives.setdefault(entry.identifier, []).append(entry)
        self._entries.append(entry)
        if is_primary:
            self._primary = entry
        return entry

    def primitives_by_prefix(self, prefix: bytes) -> list[Entry[P]]:
        """Return the entries whose output prefix is *prefix*, in keyset order."""
        return list(self._primitives.get(prefix, ()))

    def raw_primitives(self) -> list[Entry[P]]:
        """Return the entries of RAW keys, in keyset order."""
        return self.primitives_by_prefix(RAW_PREFIX)

    def all(self) -> list[Entry[P]]:
        """Return every entry, in keyset order."""
        return list(self._entries)

    def prefix_lengths(self) -> list[int]:
        """Distinct non-empty prefix lengths present, longest first."""
        return sorted({len(prefix) for prefix in self._primitives if prefix}, reverse=True)

    def __len__(self) -> int:
        return len(self._entries)


def first_success(
    primitive_set: PrimitiveSet[P],
    blob: bytes,
    attempt: Callable[[Entry[P], bytes], R],
    failure_message: str,
) -> R:
    """Run the decode-side fan-out over *primitive_set*.

    Entries whose prefix matches the start of *blob* are tried first (with the
    prefix stripped), then every RAW entry on the whole of *blob*. The first
    attempt that does not raise wins.

    Raises:
        InvalidArgumentError: With *failure_message* if every attempt fails.
    """
    for length in primitive_set.prefix_lengths():
        if len(blob) < length:
            continue
        prefix, rest = blob[:length], blob[length:]
        for entry in primitive_set.primitives_by_prefix(prefix):
            try:
                return attempt(entry, rest)
            except KeyMeshError as exc:
                logger.debug("Prefix-matched candidate rejected input: %s", exc)

    for entry in primitive_set.raw_primitives():
        try:
            return attempt(entry, blob)
        except KeyMeshError as exc:
            logger.debug("RAW candidate rejected input: %s", exc)

    raise InvalidArgumentError(failure_message)


__all__ = ["Entry", "PrimitiveSet", "first_success"]
