"""Chain assembler: builds the CA and service certificates and writes them out."""

from enum import Enum
from pathlib import Path

from .cert_utils import (
    generate_key_pair,
    get_certificate_serial_hex,
    serialize_certificate,
    validate_certificate_chain,
)
from .certificate_builder import CertificateBuilder
from .config import DistinguishedName, SSCGConfig
from .errors import CertificateBuildError, SSCGError
from .models import Chain, GenerationResult
from .path_identity import same_file
from .secure_writer import append_secure, create_secure

MAX_COMMON_NAME_LENGTH = 64
CA_COMMON_NAME = "Private CA"


class ChainState(Enum):
    """Progress of a chain build. FAILED is terminal and never retried."""

    START = "start"
    CA_KEYED = "ca_keyed"
    CA_SIGNED = "ca_signed"
    SERVICE_KEYED = "service_keyed"
    SERVICE_SIGNED = "service_signed"
    DONE = "done"
    FAILED = "failed"


def ca_common_name(hostname: str) -> str:
    """Return the CA common name for hostname, falling back to a fixed label past 64 characters."""
    common_name = f"{CA_COMMON_NAME} for {hostname}" if hostname else CA_COMMON_NAME
    if len(common_name) > MAX_COMMON_NAME_LENGTH:
        return CA_COMMON_NAME
    return common_name


def build_dn_from_config(config: SSCGConfig, common_name: str) -> DistinguishedName:
    """Build DN from SSCGConfig fields + common_name."""
    return DistinguishedName(
        country=config.country,
        organization=config.organization,
        organizational_unit=config.package_name,
        common_name=common_name,
    )


class ChainAssembler:
    """Generates a throwaway CA, a service certificate signed by it, and writes both."""

    def __init__(self, config: SSCGConfig) -> None:
        """Initialize assembler with configuration.

        Args:
            config: Validated configuration for this run
        """
        self.config = config
        self.state = ChainState.START

    def build_chain(self) -> Chain:
        """Build CA key and certificate, then service key and certificate.

        Any failure moves the assembler to ChainState.FAILED and re-raises;
        no partial chain is returned.

        Returns:
            Chain holding both key pairs and both certificates

        Raises:
            KeyGenerationError: If either key pair cannot be generated
            CertificateBuildError: If either certificate cannot be built or signed
        """
        config = self.config
        self.state = ChainState.START
        try:
            ca_key = generate_key_pair(config.key_strength)
            self.state = ChainState.CA_KEYED

            ca_cert = CertificateBuilder.build_self_signed(
                subject_dn=build_dn_from_config(config, ca_common_name(config.hostname)),
                key_pair=ca_key,
                hash_algorithm=config.hash_algorithm,
                lifetime_days=config.lifetime_days,
            )
            self.state = ChainState.CA_SIGNED

            service_key = generate_key_pair(config.key_strength)
            self.state = ChainState.SERVICE_KEYED

            service_cert = CertificateBuilder.build_signed(
                subject_dn=build_dn_from_config(config, config.hostname),
                subject_public_key=service_key.public_key,
                issuer_key_pair=ca_key,
                issuer_certificate=ca_cert,
                hash_algorithm=config.hash_algorithm,
                lifetime_days=config.lifetime_days,
                alt_names=config.subject_alt_names,
            )
            if not validate_certificate_chain(service_cert, ca_cert):
                raise CertificateBuildError("service certificate does not verify against the CA")
            self.state = ChainState.SERVICE_SIGNED
        except SSCGError:
            self.state = ChainState.FAILED
            raise

        self.state = ChainState.DONE
        return Chain(
            ca_key=ca_key,
            ca_certificate=ca_cert,
            service_key=service_key,
            service_certificate=service_cert,
        )

    def write_chain(self, chain: Chain, key_shares_cert_file: bool) -> Path:
        """Write CA certificate, service certificate, then service key.

        Writes are not transactional: if a later write fails, earlier files
        stay on disk and a rerun regenerates everything.

        Args:
            chain: Material from build_chain()
            key_shares_cert_file: Result of same_file(cert_file, cert_key_file),
                computed before anything was written. When True the key is
                appended to the service certificate file.

        Returns:
            Path the service key was written to

        Raises:
            FileWriteError: If any file cannot be written
            FileNotFoundError: If the certificate file vanished before the key append
        """
        create_secure(self.config.ca_file, serialize_certificate(chain.ca_certificate))
        cert_path = create_secure(
            self.config.cert_file, serialize_certificate(chain.service_certificate)
        )

        key_pem = chain.service_key.private_key_pem()
        if key_shares_cert_file:
            # The certificate now lives in a fresh inode; a hard link at
            # cert_key_file still points at the old one.
            return append_secure(cert_path, key_pem)
        return create_secure(self.config.cert_key_file, key_pem)

    def generate(self) -> GenerationResult:
        """Compare output paths, build the chain, and write it to disk.

        The cert-file/cert-key-file comparison happens first so nothing is
        written when a path cannot be resolved.

        Returns:
            GenerationResult with output paths and serial numbers

        Raises:
            PathResolutionError: If an output path cannot be resolved
            KeyGenerationError: If key generation fails
            CertificateBuildError: If certificate construction fails
            FileWriteError: If an output file cannot be written
        """
        key_shares_cert_file = same_file(self.config.cert_file, self.config.cert_key_file)

        chain = self.build_chain()
        key_path = self.write_chain(chain, key_shares_cert_file)

        return GenerationResult(
            ca_cert_path=self.config.ca_file,
            cert_path=self.config.cert_file,
            cert_key_path=key_path,
            key_appended=key_shares_cert_file,
            ca_serial=get_certificate_serial_hex(chain.ca_certificate),
            service_serial=get_certificate_serial_hex(chain.service_certificate),
            chain=chain,
        )
