"""trustkit error types."""

from __future__ import annotations


class TrustKitError(RuntimeError):
    """Base trustkit error."""


class ValidationError(TrustKitError):
    """Required input is missing or invalid."""

    def __init__(self, message: str, *, show_usage: bool = False) -> None:
        super().__init__(message)
        self.show_usage = show_usage


class AmbiguousScopeError(TrustKitError):
    """The owning scope could not be defaulted."""

    def __init__(self, *, kind: str, count: int) -> None:
        if count == 0:
            message = f"no {kind}s defined - add {kind} first"
        else:
            message = (
                f"multiple {kind}s found - specify --{kind} or set a default {kind} in the config"
            )
        super().__init__(message)
        self.kind = kind
        self.count = count


class KeyResolutionError(TrustKitError):
    """No usable key material could be resolved."""


class TimeRangeError(TrustKitError):
    """Validity window is malformed or inverted."""


class ClaimTypeMismatchError(TrustKitError):
    """A claim editor was handed a claim of the wrong kind."""


class ClaimDecodeError(TrustKitError):
    """A stored claim token could not be decoded or verified."""


class StoreError(TrustKitError):
    """The entity or key store could not be read or written."""


class PromptAbortedError(TrustKitError):
    """The operator aborted an interactive prompt."""
