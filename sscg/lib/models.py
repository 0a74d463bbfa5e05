"""Data and result models for certificate generation."""

from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from .config import KeyStrength


class CertificateMetadata(TypedDict):
    """Human-readable summary of a generated certificate."""

    serialNumber: str
    subject: str
    issuer: str
    notBefore: str
    notAfter: str
    subjectAltNames: list[str]
    isCA: bool


@dataclass(frozen=True)
class KeyPair:
    """RSA private key tagged with the strength it was generated at."""

    private_key: RSAPrivateKey
    strength: KeyStrength

    @property
    def public_key(self) -> RSAPublicKey:
        return self.private_key.public_key()

    def private_key_pem(self) -> bytes:
        """Serialize private key to PEM format (PKCS1, no encryption)."""
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )


@dataclass(frozen=True)
class Chain:
    """CA and service material produced by one run, held only in memory."""

    ca_key: KeyPair
    ca_certificate: x509.Certificate
    service_key: KeyPair
    service_certificate: x509.Certificate


@dataclass
class GenerationResult:
    """Result from a complete generate-and-write run.

    Contains output file paths and serial numbers for the CA and service certificates.
    """

    ca_cert_path: Path
    cert_path: Path
    cert_key_path: Path
    key_appended: bool
    ca_serial: str
    service_serial: str
    chain: Chain
