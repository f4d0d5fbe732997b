"""
Primitive Wrappers

A wrapper turns a PrimitiveSet into one object implementing the same
primitive interface. Encode-side operations (sign, compute MAC, encrypt) use
the primary entry only; decode-side operations (verify, decrypt) try
candidates through :func:`keymesh.core.primitive_set.first_success`.
"""

from __future__ import annotations

import abc
from typing import ClassVar, Generic, TypeVar

from keymesh.core.output_prefix import LEGACY_FORMAT_SUFFIX
from keymesh.core.primitive_set import Entry, PrimitiveSet
from keymesh.models import OutputPrefixType

P = TypeVar("P")


class PrimitiveWrapper(abc.ABC, Generic[P]):
    """Combines a PrimitiveSet of ``input_primitive_class`` into one ``primitive_class``.

    Attributes:
        primitive_class: The interface the wrapped object implements.
        input_primitive_class: The interface of the set's entries.
    """

    primitive_class: ClassVar[type]
    input_primitive_class: ClassVar[type]

    @abc.abstractmethod
    def wrap(self, primitive_set: PrimitiveSet[P]) -> P:
        """Combine *primitive_set* into a single primitive."""


def legacy_data(entry: Entry, data: bytes) -> bytes:
    """Return the bytes a key actually signs or MACs for *data*.

    LEGACY keys authenticate ``data || 0x00``; every other prefix type
    authenticates *data* unchanged.
    """
    if entry.output_prefix_type == OutputPrefixType.LEGACY:
        return data + LEGACY_FORMAT_SUFFIX
    return data


__all__ = ["PrimitiveWrapper", "legacy_data"]
