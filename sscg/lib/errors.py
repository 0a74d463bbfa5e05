"""Exception types raised by the certificate generation core."""


class SSCGError(Exception):
    """Base class for all certificate generation failures."""


class KeyGenerationError(SSCGError):
    """Private key could not be generated at the requested strength."""


class CertificateBuildError(SSCGError):
    """Certificate template was rejected or could not be signed."""


class InvalidSubjectError(CertificateBuildError):
    """Subject or alternative names cannot be encoded into a certificate."""


class PathResolutionError(SSCGError):
    """Output path could not be resolved to a location on disk."""


class FileWriteError(SSCGError):
    """Output file could not be written in full."""
