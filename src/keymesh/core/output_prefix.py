"""
Output Prefix Encoding

Short tags prepended to ciphertexts, signatures and MAC tags so the decoding
side can narrow its candidate keys to the one that produced the output.
"""

from __future__ import annotations

import struct

from keymesh.exceptions import InvalidArgumentError
from keymesh.models import Key, OutputPrefixType

TINK_START_BYTE = b"\x01"
LEGACY_START_BYTE = b"\x00"
RAW_PREFIX = b""

NON_RAW_PREFIX_SIZE = 5
CRUNCHY_PREFIX_SIZE = 4

# Appended to the signed/MACed data by LEGACY keys.
LEGACY_FORMAT_SUFFIX = b"\x00"


def output_prefix(key: Key) -> bytes:
    """Compute the output prefix for *key*.

    TINK and LEGACY keys get a start byte followed by the big-endian key id,
    CRUNCHY keys the bare big-endian key id, RAW keys nothing.

    Raises:
        InvalidArgumentError: If the prefix type is not recognized.
    """
    return prefix_for(key.output_prefix_type, key.key_id)


def prefix_for(output_prefix_type: OutputPrefixType, key_id: int) -> bytes:
    """Compute the output prefix for a prefix type and key id."""
    if output_prefix_type == OutputPrefixType.TINK:
        return TINK_START_BYTE + struct.pack(">I", key_id)
    if output_prefix_type == OutputPrefixType.LEGACY:
        return LEGACY_START_BYTE + struct.pack(">I", key_id)
    if output_prefix_type == OutputPrefixType.CRUNCHY:
        return struct.pack(">I", key_id)
    if output_prefix_type == OutputPrefixType.RAW:
        return RAW_PREFIX
    raise InvalidArgumentError(f"unknown output prefix type: {output_prefix_type}")
