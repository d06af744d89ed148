from typing import Any, Dict, Optional


class CheckerError(Exception):
    """Base class for every error that aborts a check run."""


# --- Configuration ---
class ConfigurationError(CheckerError):
    pass


class InputRequiredError(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(f"Input required and not supplied: {name}")
        self.name = name


class InvalidFlagsError(ConfigurationError):
    def __init__(self, bad_chars: str):
        super().__init__(f'FLAGS contains invalid characters "{bad_chars}".')
        self.bad_chars = bad_chars


class PatternSyntaxError(ConfigurationError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(f'PATTERN "{pattern}" is not a valid regular expression: {reason}')
        self.pattern = pattern


class AuthorizationError(ConfigurationError):
    pass


class MissingToken(AuthorizationError):
    def __init__(self, option: str):
        super().__init__(f"The `{option}` option requires a github access token.")
        self.option = option


# --- Payload shape ---
class PayloadShapeError(CheckerError):
    pass


class NoPayload(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No payload found in the context.")


class NoPullRequest(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No pull_request found in the payload.")


class NoTitle(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No title found in the pull_request.")


class NoNumber(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No number found in the pull_request.")


class NoRepository(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No repository found in the payload.")


class NoRepositoryName(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No name found in the repository.")


class NoRepositoryOwner(PayloadShapeError):
    def __init__(self) -> None:
        super().__init__("No owner found in the repository.")


class InvalidPayload(PayloadShapeError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid event payload: {reason}")
        self.reason = reason


class UnsupportedEvent(PayloadShapeError):
    def __init__(self, event_name: Optional[str]):
        super().__init__(f'Event "{event_name}" is not supported.')
        self.event_name = event_name


# --- Remote ---
class RemoteFetchError(CheckerError):
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


# --- Outcome ---
class MatchFailure(CheckerError):
    """One or more messages did not match; carries the configured error text."""

    def __init__(self, error: str):
        super().__init__(error)
        self.error = error
