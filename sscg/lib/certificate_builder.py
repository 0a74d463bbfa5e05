"""Certificate builder for X.509 certificate construction."""

import ipaddress
from datetime import UTC, datetime, timedelta

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from cryptography.x509.oid import ExtendedKeyUsageOID

from .cert_utils import generate_serial_number
from .config import DistinguishedName, HashAlgorithm
from .errors import CertificateBuildError, InvalidSubjectError
from .models import KeyPair


def dedupe_alt_names(hostname: str, alt_names: tuple[str, ...] | list[str]) -> list[str]:
    """Return hostname followed by alt_names, dropping empties and repeats.

    Comparison is case-insensitive; the first spelling seen is kept.
    """
    seen: set[str] = set()
    names: list[str] = []
    for name in (hostname, *alt_names):
        name = name.strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        names.append(name)
    return names


def _to_general_name(name: str) -> x509.GeneralName:
    try:
        return x509.IPAddress(ipaddress.ip_address(name))
    except ValueError:
        pass
    try:
        return x509.DNSName(name)
    except ValueError as e:
        raise InvalidSubjectError(f"invalid subject alternative name {name!r}: {e}") from e


def _validity_window(lifetime_days: int) -> tuple[datetime, datetime]:
    if lifetime_days <= 0:
        raise CertificateBuildError(f"lifetime must be a positive number of days, got {lifetime_days}")
    # Certificates carry whole seconds; truncate so notAfter - notBefore is exact.
    not_before = datetime.now(UTC).replace(microsecond=0)
    try:
        not_after = not_before + timedelta(days=lifetime_days)
    except OverflowError as e:
        raise CertificateBuildError(f"lifetime of {lifetime_days} days is out of range") from e
    return not_before, not_after


def _sign(
    builder: x509.CertificateBuilder,
    signing_key: KeyPair,
    hash_algorithm: HashAlgorithm,
) -> x509.Certificate:
    try:
        return builder.sign(signing_key.private_key, hash_algorithm.to_hash())
    except (TypeError, ValueError, UnsupportedAlgorithm) as e:
        raise CertificateBuildError(
            f"signing with {hash_algorithm} and a {int(signing_key.strength)}-bit key failed: {e}"
        ) from e


class CertificateBuilder:
    """Builds the self-signed CA certificate and the service certificate it issues."""

    @staticmethod
    def build_self_signed(
        subject_dn: DistinguishedName,
        key_pair: KeyPair,
        hash_algorithm: HashAlgorithm,
        lifetime_days: int,
    ) -> x509.Certificate:
        """Build self-signed CA certificate.

        Args:
            subject_dn: Distinguished name for certificate subject and issuer
            key_pair: CA key pair, used both as subject key and for signing
            hash_algorithm: Signature hash algorithm
            lifetime_days: Certificate validity period in days

        Returns:
            Self-signed X.509 certificate with CA extensions

        Raises:
            CertificateBuildError: If lifetime is not positive or signing fails
            InvalidSubjectError: If the subject cannot be encoded
        """
        not_before, not_after = _validity_window(lifetime_days)
        subject = subject_dn.to_x509_name()

        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(key_pair.public_key)
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=True, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=False,
                    content_commitment=False,
                    key_encipherment=False,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=True,
                    crl_sign=True,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(key_pair.public_key),
                critical=False,
            )
        )

        return _sign(builder, key_pair, hash_algorithm)

    @staticmethod
    def build_signed(
        subject_dn: DistinguishedName,
        subject_public_key: RSAPublicKey,
        issuer_key_pair: KeyPair,
        issuer_certificate: x509.Certificate,
        hash_algorithm: HashAlgorithm,
        lifetime_days: int,
        alt_names: tuple[str, ...] | list[str] = (),
    ) -> x509.Certificate:
        """Build service (TLS server) certificate signed by the CA.

        The subject common name is the DN's common_name (the hostname). The SAN
        extension lists the hostname followed by alt_names, deduplicated. When
        the hostname is empty the first alternative name becomes the CN.

        Args:
            subject_dn: Distinguished name for certificate subject
            subject_public_key: Public key of the service key pair
            issuer_key_pair: CA key pair used for signing
            issuer_certificate: CA certificate whose subject becomes the issuer DN
            hash_algorithm: Signature hash algorithm
            lifetime_days: Certificate validity period in days
            alt_names: Additional hostnames or IP addresses

        Returns:
            X.509 end-entity certificate signed by the CA

        Raises:
            CertificateBuildError: If lifetime is not positive or signing fails
            InvalidSubjectError: If there is no usable name or a name cannot be encoded
        """
        not_before, not_after = _validity_window(lifetime_days)

        names = dedupe_alt_names(subject_dn.common_name, alt_names)
        if not names:
            raise InvalidSubjectError("hostname is empty and no subject alternative names were given")
        if not subject_dn.common_name.strip():
            subject_dn = DistinguishedName(
                country=subject_dn.country,
                organization=subject_dn.organization,
                organizational_unit=subject_dn.organizational_unit,
                common_name=names[0],
            )

        builder = (
            x509.CertificateBuilder()
            .subject_name(subject_dn.to_x509_name())
            .issuer_name(issuer_certificate.subject)
            .public_key(subject_public_key)
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]),
                critical=False,
            )
            .add_extension(
                x509.SubjectAlternativeName([_to_general_name(name) for name in names]),
                critical=False,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(subject_public_key),
                critical=False,
            )
            .add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_key_pair.public_key),
                critical=False,
            )
        )

        return _sign(builder, issuer_key_pair, hash_algorithm)
