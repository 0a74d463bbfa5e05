"""Certificate generation configuration dataclasses."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509 import oid

from .errors import InvalidSubjectError


class KeyStrength(IntEnum):
    """Supported RSA modulus sizes in bits."""

    BITS_512 = 512
    BITS_1024 = 1024
    BITS_2048 = 2048
    BITS_4096 = 4096

    @classmethod
    def from_string(cls, value: str) -> "KeyStrength":
        """Parse a command-line value such as '2048'.

        Raises:
            ValueError: If the value is not one of the supported strengths
        """
        try:
            return cls(int(value))
        except ValueError:
            choices = ",".join(str(member.value) for member in cls)
            raise ValueError(f"key strength must be one of {{{choices}}}, got {value!r}") from None


class HashAlgorithm(StrEnum):
    """Supported signature hash algorithms."""

    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @classmethod
    def from_string(cls, value: str) -> "HashAlgorithm":
        """Parse a command-line value such as 'sha384' (case-insensitive).

        Raises:
            ValueError: If the value is not one of the supported algorithms
        """
        try:
            return cls(value.lower())
        except ValueError:
            choices = ",".join(member.value for member in cls)
            raise ValueError(f"hash algorithm must be one of {{{choices}}}, got {value!r}") from None

    def to_hash(self) -> hashes.HashAlgorithm:
        """Return the cryptography hash instance used for signing."""
        return {
            HashAlgorithm.SHA256: hashes.SHA256,
            HashAlgorithm.SHA384: hashes.SHA384,
            HashAlgorithm.SHA512: hashes.SHA512,
        }[self]()


@dataclass(frozen=True)
class SSCGConfig:
    """Fully populated configuration for one certificate generation run."""

    hostname: str
    ca_file: Path
    cert_file: Path
    cert_key_file: Path
    subject_alt_names: tuple[str, ...] = ()
    key_strength: KeyStrength = KeyStrength.BITS_2048
    hash_algorithm: HashAlgorithm = HashAlgorithm.SHA256
    lifetime_days: int = 3650
    country: str = "US"
    organization: str = "Unspecified"
    package_name: str = "Unknown"


@dataclass
class DistinguishedName:
    """X.509 Subject Distinguished Name."""

    country: str
    organization: str
    common_name: str
    organizational_unit: str = ""

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name for certificate generation.

        Empty country, organization and organizational unit values are left out.

        Raises:
            InvalidSubjectError: If an attribute value cannot be encoded
        """
        attributes = [
            (oid.NameOID.COUNTRY_NAME, self.country),
            (oid.NameOID.ORGANIZATION_NAME, self.organization),
            (oid.NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit),
        ]
        try:
            name_attributes = [
                x509.NameAttribute(attr_oid, value) for attr_oid, value in attributes if value
            ]
            name_attributes.append(x509.NameAttribute(oid.NameOID.COMMON_NAME, self.common_name))
        except ValueError as e:
            raise InvalidSubjectError(f"invalid subject {self}: {e}") from e
        return x509.Name(name_attributes)
