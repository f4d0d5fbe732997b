"""
Primitive Interfaces

The cryptographic capabilities KeyMesh hands to callers. Each interface is
independent of key type: a keyset of mixed ECDSA and Ed25519 keys still
surfaces as a single PublicKeySign.

Failures are raised as InvalidArgumentError; a failed verification is never
reported as a ``False`` return value.
"""

from __future__ import annotations

import abc


class PublicKeySign(abc.ABC):
    """Produces digital signatures."""

    @abc.abstractmethod
    def sign(self, data: bytes) -> bytes:
        """Sign *data*.

        Args:
            data: Arbitrary bytes to sign.

        Returns:
            The signature bytes, including any output prefix.
        """


class PublicKeyVerify(abc.ABC):
    """Verifies digital signatures."""

    @abc.abstractmethod
    def verify(self, signature: bytes, data: bytes) -> None:
        """Verify *signature* over *data*.

        Raises:
            InvalidArgumentError: If the signature is not valid.
        """


class Mac(abc.ABC):
    """Computes and verifies message authentication codes."""

    @abc.abstractmethod
    def compute_mac(self, data: bytes) -> bytes:
        """Compute the MAC tag of *data*."""

    @abc.abstractmethod
    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        """Verify *mac_value* over *data*.

        Raises:
            InvalidArgumentError: If the tag is not valid.
        """


class Aead(abc.ABC):
    """Authenticated encryption with associated data."""

    @abc.abstractmethod
    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        """Encrypt *plaintext*, authenticating *associated_data*."""

    @abc.abstractmethod
    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        """Decrypt *ciphertext*.

        Raises:
            InvalidArgumentError: If authentication fails.
        """


class HybridEncrypt(abc.ABC):
    """Public-key encryption of arbitrary-length messages."""

    @abc.abstractmethod
    def encrypt(self, plaintext: bytes, context_info: bytes) -> bytes:
        """Encrypt *plaintext* bound to *context_info*."""


class HybridDecrypt(abc.ABC):
    """Private-key decryption of HybridEncrypt ciphertexts."""

    @abc.abstractmethod
    def decrypt(self, ciphertext: bytes, context_info: bytes) -> bytes:
        """Decrypt *ciphertext* bound to *context_info*.

        Raises:
            InvalidArgumentError: If decryption fails.
        """


__all__ = [
    "PublicKeySign",
    "PublicKeyVerify",
    "Mac",
    "Aead",
    "HybridEncrypt",
    "HybridDecrypt",
]
