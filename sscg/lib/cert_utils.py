"""Key generation, serialization, and metadata helpers."""

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .config import KeyStrength
from .errors import KeyGenerationError
from .models import CertificateMetadata, KeyPair

MINIMUM_KEY_STRENGTH = 1024


def generate_key_pair(strength: KeyStrength = KeyStrength.BITS_2048) -> KeyPair:
    """Generate a fresh RSA key pair with the requested modulus size.

    Args:
        strength: Modulus size in bits

    Returns:
        KeyPair whose private key has key_size == strength

    Raises:
        KeyGenerationError: If strength is below MINIMUM_KEY_STRENGTH or the
            backend refuses to generate the key
    """
    if strength < MINIMUM_KEY_STRENGTH:
        raise KeyGenerationError(
            f"key strength {int(strength)} is below the minimum of {MINIMUM_KEY_STRENGTH} bits"
        )
    try:
        private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=int(strength),
        )
    except (ValueError, MemoryError) as e:
        raise KeyGenerationError(f"failed to generate {int(strength)}-bit RSA key: {e}") from e
    return KeyPair(private_key=private_key, strength=strength)


def serialize_certificate(cert: x509.Certificate) -> bytes:
    """Serialize certificate to PEM format."""
    return cert.public_bytes(serialization.Encoding.PEM)


def generate_serial_number() -> int:
    """Generate a random, positive certificate serial number.

    Uses x509.random_serial_number(), which draws 159 bits from the OS CSPRNG.
    That is well above the 64-bit CA/Browser Forum minimum, so the CA and
    service serials of one run will not collide in practice.
    """
    return x509.random_serial_number()


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def get_subject_alt_names(cert: x509.Certificate) -> list[str]:
    """Return DNS and IP subject alternative names in certificate order."""
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return []
    return [str(name.value) for name in san if isinstance(name, (x509.DNSName, x509.IPAddress))]


def is_ca_certificate(cert: x509.Certificate) -> bool:
    try:
        return cert.extensions.get_extension_for_class(x509.BasicConstraints).value.ca
    except x509.ExtensionNotFound:
        return False


def extract_certificate_metadata(cert: x509.Certificate) -> CertificateMetadata:
    """Extract certificate metadata for debug output.

    Args:
        cert: X.509 certificate to summarize

    Returns:
        CertificateMetadata with serial, subject/issuer DNs, validity, SANs and CA flag
    """
    return CertificateMetadata(
        serialNumber=get_certificate_serial_hex(cert),
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        notBefore=cert.not_valid_before_utc.isoformat(),
        notAfter=cert.not_valid_after_utc.isoformat(),
        subjectAltNames=get_subject_alt_names(cert),
        isCA=is_ca_certificate(cert),
    )


def validate_certificate_chain(
    service_cert: x509.Certificate,
    ca_cert: x509.Certificate,
) -> bool:
    """Verify certificate chain signatures (service -> CA -> CA).

    Returns True if chain is valid, False otherwise.
    """
    try:
        service_cert.verify_directly_issued_by(ca_cert)
        ca_cert.verify_directly_issued_by(ca_cert)
        return True
    except (InvalidSignature, TypeError, ValueError):
        return False
