"""
Exception hierarchy for newsdesk.

Every error carries a machine-readable code, an optional suggestion for the
user, and whether the pipeline can degrade around it.
"""

from typing import Optional


class NewsdeskError(Exception):
    """Base for all newsdesk errors."""

    code = "NEWSDESK_ERROR"

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_user_message(self) -> str:
        """Format the error for display."""
        msg = f"Error: {self.message}"
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


class UrlSecurityError(NewsdeskError):
    """Raised when a URL fails pre-flight security validation."""

    code = "URL_SECURITY"

    def __init__(self, reason: str):
        super().__init__(reason, recoverable=True)
        self.reason = reason


class NetworkError(NewsdeskError):
    """Timeout, DNS or connection failure on a single request."""

    code = "NETWORK_ERROR"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, recoverable=True)
        self.url = url


class ResponseParseError(NewsdeskError):
    """Model output did not contain the expected structured payload."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message, recoverable=True)
        self.raw = raw


class ConfigError(NewsdeskError):
    """Feed or model configuration could not be loaded."""

    code = "CONFIG_ERROR"

    def __init__(self, message: str, config_path: Optional[str] = None):
        super().__init__(
            message,
            suggestion=f"Check the configuration file at {config_path}" if config_path else None,
            recoverable=True,
        )
        self.config_path = config_path


class ProviderError(NewsdeskError):
    """A model provider returned an error for one call."""

    code = "PROVIDER_ERROR"

    def __init__(self, message: str, provider: str, status_code: Optional[int] = None):
        if status_code == 401:
            suggestion = f"Check your {provider} API key"
        elif status_code == 429:
            suggestion = "Rate limited - wait a moment and try again"
        elif status_code is not None and status_code >= 500:
            suggestion = f"{provider} is having issues - try a different model"
        else:
            suggestion = None
        super().__init__(message, suggestion=suggestion, recoverable=True)
        self.provider = provider
        self.status_code = status_code


class ProviderUnavailableError(NewsdeskError):
    """No credential is configured for any candidate model."""

    code = "PROVIDER_UNAVAILABLE"

    def __init__(self, env_vars: dict[str, list[str]]):
        lines = [
            f"  - {' or '.join(names)} for {provider}"
            for provider, names in env_vars.items()
        ]
        message = "No models available. Please set at least one API key:\n" + "\n".join(lines)
        super().__init__(
            message,
            suggestion="Export one of the variables above or add it to your .env file",
            recoverable=False,
        )
        self.env_vars = env_vars
