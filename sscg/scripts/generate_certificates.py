#!/usr/bin/env python3
"""Generate a private CA and a service certificate signed by it."""

import argparse
import socket
import sys
from pathlib import Path

from sscg.lib.cert_utils import extract_certificate_metadata
from sscg.lib.chain_assembler import ChainAssembler
from sscg.lib.config import HashAlgorithm, KeyStrength, SSCGConfig
from sscg.lib.errors import SSCGError
from sscg.lib.logging_config import VERBOSE_LEVEL, Verbosity, configure_logging

VERSION = "1.0.0"


def _key_strength(value: str) -> KeyStrength:
    try:
        return KeyStrength.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _hash_algorithm(value: str) -> HashAlgorithm:
    try:
        return HashAlgorithm.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a whole number of days, got {value!r}") from e
    if number < 0:
        raise argparse.ArgumentTypeError(f"lifetime cannot be negative, got {number}")
    return number


def build_parser(cwd: Path) -> argparse.ArgumentParser:
    """Build the argument parser; output file defaults live in cwd."""
    parser = argparse.ArgumentParser(
        prog="sscg",
        description="Generate a private CA and a service certificate signed by it",
    )
    parser.add_argument("--quiet", action="store_true", help="Display no output unless there is an error.")
    parser.add_argument("--verbose", action="store_true", help="Display progress messages.")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable logging of debug messages, including certificate details. Implies verbose.",
    )
    parser.add_argument("--version", action="store_true", help="Display the version number.")
    parser.add_argument(
        "--lifetime",
        type=_non_negative_int,
        default=3650,
        help="Certificate lifetime in days (default: 3650)",
    )
    parser.add_argument(
        "--key-strength",
        type=_key_strength,
        default=KeyStrength.BITS_2048,
        help="Strength of the certificate private keys in bits. {512,1024,2048,4096} (default: 2048)",
    )
    parser.add_argument(
        "--hash-alg",
        type=_hash_algorithm,
        default=HashAlgorithm.SHA256,
        help="Hashing algorithm to use for signing. {sha256,sha384,sha512} (default: sha256)",
    )
    parser.add_argument(
        "--package",
        default="Unknown",
        help="The name of the package needing a certificate (default: Unknown)",
    )
    parser.add_argument(
        "--ca-file",
        type=Path,
        default=cwd / "ca.crt",
        help="Path where the public CA certificate will be stored (default: ./ca.crt)",
    )
    parser.add_argument(
        "--cert-file",
        type=Path,
        default=cwd / "service.pem",
        help="Path where the public service certificate will be stored (default: ./service.pem)",
    )
    parser.add_argument(
        "--cert-key-file",
        type=Path,
        default=cwd / "service-key.pem",
        help="Path where the service private key will be stored. May equal --cert-file "
        "(default: ./service-key.pem)",
    )
    parser.add_argument(
        "--hostname",
        default=socket.getfqdn(),
        help="The valid hostname of the certificate. Must be an FQDN. (default: this host)",
    )
    parser.add_argument(
        "--subject-alt-name",
        action="append",
        default=[],
        dest="subject_alt_names",
        help="An additional valid hostname for the certificate. May be specified multiple times.",
    )
    parser.add_argument("--country", default="US", help="Certificate DN: Country (C) (default: US)")
    parser.add_argument(
        "--organization",
        default="Unspecified",
        help="Certificate DN: Organization (O) (default: Unspecified)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SSCGConfig:
    """Translate parsed arguments into the immutable run configuration."""
    return SSCGConfig(
        hostname=args.hostname,
        ca_file=args.ca_file,
        cert_file=args.cert_file,
        cert_key_file=args.cert_key_file,
        subject_alt_names=tuple(args.subject_alt_names),
        key_strength=args.key_strength,
        hash_algorithm=args.hash_alg,
        lifetime_days=args.lifetime,
        country=args.country,
        organization=args.organization,
        package_name=args.package,
    )


def main(argv: list[str] | None = None) -> int:
    """Generate the CA certificate, service certificate and service key.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser(Path.cwd()).parse_args(argv)

    if args.version:
        print(VERSION)

    logger = configure_logging(Verbosity.from_flags(args.quiet, args.verbose, args.debug))
    config = config_from_args(args)
    logger.debug("Configuration: %s", config)

    assembler = ChainAssembler(config)
    try:
        logger.log(VERBOSE_LEVEL, "Generating private CA and service certificate...")
        result = assembler.generate()
        logger.log(VERBOSE_LEVEL, "CA serial: %s", result.ca_serial)
        logger.log(VERBOSE_LEVEL, "Service serial: %s", result.service_serial)
        logger.debug(
            "CA certificate",
            extra={"certificate": extract_certificate_metadata(result.chain.ca_certificate)},
        )
        logger.debug(
            "Service certificate",
            extra={"certificate": extract_certificate_metadata(result.chain.service_certificate)},
        )

        logger.info("CA public certificate written to %s.", result.ca_cert_path)
        logger.info("Service public certificate written to %s.", result.cert_path)
        if result.key_appended:
            logger.info("Service certificate private key appended to %s.", result.cert_key_path)
        else:
            logger.info("Service certificate private key written to %s.", result.cert_key_path)
        return 0

    except SSCGError as e:
        logger.error("Certificate generation failed: %s", e)
        logger.debug("Chain state at failure: %s", assembler.state.value)
        return 1
    except FileNotFoundError as e:
        logger.error("Output file not found: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
