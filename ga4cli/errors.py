"""
Error types raised by ga4cli
"""


class Ga4CliError(Exception):
    """Base class for every error the CLI reports to the user"""


class InvalidInputError(Ga4CliError, ValueError):
    """User input was rejected before any query was issued"""


class ConfigError(Ga4CliError):
    """Configuration is missing or unreadable"""


class UpstreamError(Ga4CliError):
    """The reporting API or the identity provider failed"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
