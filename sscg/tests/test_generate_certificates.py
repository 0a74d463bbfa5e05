"""Tests for the generate_certificates command-line entry point."""

from pathlib import Path

import pytest
from cryptography import x509

from sscg.lib.cert_utils import get_subject_alt_names
from sscg.lib.config import HashAlgorithm, KeyStrength
from sscg.scripts.generate_certificates import build_parser, config_from_args, main


def _output_args(directory: Path) -> list[str]:
    return [
        "--ca-file",
        str(directory / "ca.crt"),
        "--cert-file",
        str(directory / "service.pem"),
        "--cert-key-file",
        str(directory / "service-key.pem"),
    ]


class TestParser:
    """Tests for argument parsing and defaults."""

    def test_defaults(self, temp_output_dir: Path) -> None:
        """Defaults match the documented values and live in the working directory."""
        args = build_parser(temp_output_dir).parse_args([])
        config = config_from_args(args)

        assert config.key_strength is KeyStrength.BITS_2048
        assert config.hash_algorithm is HashAlgorithm.SHA256
        assert config.lifetime_days == 3650
        assert config.country == "US"
        assert config.organization == "Unspecified"
        assert config.package_name == "Unknown"
        assert config.ca_file == temp_output_dir / "ca.crt"
        assert config.cert_file == temp_output_dir / "service.pem"
        assert config.cert_key_file == temp_output_dir / "service-key.pem"
        assert config.subject_alt_names == ()

    def test_repeated_subject_alt_names(self, temp_output_dir: Path) -> None:
        """--subject-alt-name may be given several times, order kept."""
        args = build_parser(temp_output_dir).parse_args(
            ["--subject-alt-name", "a.example.com", "--subject-alt-name", "b.example.com"]
        )
        assert config_from_args(args).subject_alt_names == ("a.example.com", "b.example.com")

    def test_enum_options_parsed(self, temp_output_dir: Path) -> None:
        """Key strength and hash algorithm become enum members."""
        args = build_parser(temp_output_dir).parse_args(
            ["--key-strength", "4096", "--hash-alg", "sha512"]
        )
        assert args.key_strength is KeyStrength.BITS_4096
        assert args.hash_alg is HashAlgorithm.SHA512

    @pytest.mark.parametrize(
        "argv",
        [
            ["--key-strength", "3072"],
            ["--hash-alg", "md5"],
            ["--lifetime", "-5"],
            ["--lifetime", "ten"],
        ],
    )
    def test_invalid_values_exit_with_usage_error(
        self, temp_output_dir: Path, argv: list[str]
    ) -> None:
        """Values outside the closed sets are rejected by argparse."""
        with pytest.raises(SystemExit) as exc_info:
            build_parser(temp_output_dir).parse_args(argv)
        assert exc_info.value.code == 2


class TestMain:
    """Tests for main()."""

    def test_success_writes_files(self, temp_output_dir: Path) -> None:
        """A normal run returns 0 and writes all three files."""
        exit_code = main(
            [
                *_output_args(temp_output_dir),
                "--quiet",
                "--hostname",
                "svc.example.com",
                "--subject-alt-name",
                "svc2.example.com",
                "--organization",
                "Example",
            ]
        )

        assert exit_code == 0
        service_cert = x509.load_pem_x509_certificate((temp_output_dir / "service.pem").read_bytes())
        assert set(get_subject_alt_names(service_cert)) == {"svc.example.com", "svc2.example.com"}
        assert (temp_output_dir / "service-key.pem").exists()

    def test_debug_run_succeeds(self, temp_output_dir: Path) -> None:
        """--debug logs certificate details without failing."""
        assert main([*_output_args(temp_output_dir), "--debug", "--hostname", "svc.example.com"]) == 0

    def test_zero_lifetime_returns_1(self, temp_output_dir: Path) -> None:
        """Lifetime 0 fails with exit code 1 and writes nothing."""
        exit_code = main([*_output_args(temp_output_dir), "--quiet", "--lifetime", "0"])

        assert exit_code == 1
        assert list(temp_output_dir.iterdir()) == []

    def test_512_bit_key_returns_1(self, temp_output_dir: Path) -> None:
        """Keys below the strength floor fail with exit code 1."""
        exit_code = main([*_output_args(temp_output_dir), "--quiet", "--key-strength", "512"])

        assert exit_code == 1
        assert list(temp_output_dir.iterdir()) == []

    def test_version_printed(
        self, temp_output_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """--version prints the version and the run continues."""
        exit_code = main([*_output_args(temp_output_dir), "--quiet", "--version"])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "1.0.0"
