"""Test fixtures for sscg tests."""

from pathlib import Path

import pytest
from cryptography import x509

from sscg.lib.cert_utils import generate_key_pair
from sscg.lib.certificate_builder import CertificateBuilder
from sscg.lib.config import DistinguishedName, HashAlgorithm, KeyStrength, SSCGConfig
from sscg.lib.models import KeyPair


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Return temporary directory for test output artifacts."""
    return tmp_path


@pytest.fixture
def sscg_config(temp_output_dir: Path) -> SSCGConfig:
    """Return test configuration writing to three distinct files."""
    return SSCGConfig(
        hostname="svc.example.com",
        ca_file=temp_output_dir / "ca.crt",
        cert_file=temp_output_dir / "service.pem",
        cert_key_file=temp_output_dir / "service-key.pem",
        subject_alt_names=("svc2.example.com",),
        key_strength=KeyStrength.BITS_2048,  # Faster for tests
        hash_algorithm=HashAlgorithm.SHA256,
        lifetime_days=3650,
        country="US",
        organization="Example",
        package_name="test-package",
    )


@pytest.fixture
def ca_key() -> KeyPair:
    """Generate RSA key pair for the CA."""
    return generate_key_pair(KeyStrength.BITS_2048)


@pytest.fixture
def ca_dn() -> DistinguishedName:
    """Return test CA distinguished name."""
    return DistinguishedName(
        country="US",
        organization="Example",
        organizational_unit="test-package",
        common_name="Private CA for svc.example.com",
    )


@pytest.fixture
def ca_cert(ca_key: KeyPair, ca_dn: DistinguishedName) -> x509.Certificate:
    """Generate self-signed CA certificate."""
    return CertificateBuilder.build_self_signed(
        subject_dn=ca_dn,
        key_pair=ca_key,
        hash_algorithm=HashAlgorithm.SHA256,
        lifetime_days=30,
    )


@pytest.fixture
def service_key() -> KeyPair:
    """Generate RSA key pair for the service certificate."""
    return generate_key_pair(KeyStrength.BITS_2048)


@pytest.fixture
def service_dn() -> DistinguishedName:
    """Return test service distinguished name."""
    return DistinguishedName(
        country="US",
        organization="Example",
        organizational_unit="test-package",
        common_name="svc.example.com",
    )


@pytest.fixture
def service_cert(
    service_dn: DistinguishedName,
    service_key: KeyPair,
    ca_key: KeyPair,
    ca_cert: x509.Certificate,
) -> x509.Certificate:
    """Generate service certificate signed by the CA."""
    return CertificateBuilder.build_signed(
        subject_dn=service_dn,
        subject_public_key=service_key.public_key,
        issuer_key_pair=ca_key,
        issuer_certificate=ca_cert,
        hash_algorithm=HashAlgorithm.SHA256,
        lifetime_days=30,
        alt_names=["svc2.example.com"],
    )
