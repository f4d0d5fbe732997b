"""Hash function identifiers shared by the built-in key types."""

from __future__ import annotations

import enum

from cryptography.hazmat.primitives import hashes

from keymesh.exceptions import InvalidArgumentError


class HashType(str, enum.Enum):
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"


_HASHES = {
    HashType.SHA256: hashes.SHA256,
    HashType.SHA384: hashes.SHA384,
    HashType.SHA512: hashes.SHA512,
}


def hash_algorithm(hash_type: HashType) -> hashes.HashAlgorithm:
    """Return a fresh ``cryptography`` hash object for *hash_type*."""
    try:
        return _HASHES[hash_type]()
    except KeyError:
        raise InvalidArgumentError(f"unsupported hash type: {hash_type}") from None
