"""Error classes for the deposit flow.

Each error carries the message shown to the user and whether re-trying the
same operation can succeed without a configuration change.
"""

# Recovery action offered after a failed execution
RECOVERY_BRIDGE_TO_SELF = "bridge_to_self"


class UniYieldError(Exception):
    """Base error for deposit-flow operations."""

    user_message = "Something went wrong"
    retryable = False

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        self.message = message or self.user_message


class ConfigurationError(UniYieldError):
    """A required chain, token or vault mapping is missing.

    Raised before any network call; not retryable without reconfiguration.
    """

    user_message = "Unsupported chain or token"
    retryable = False


class ExtractionError(UniYieldError):
    """No usable guaranteed-amount field was found in a quote."""

    user_message = "Could not determine deposit amount"
    retryable = True


class QuoteError(UniYieldError):
    """The routing service failed or returned no routes."""

    user_message = "Could not fetch a route"
    retryable = True

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExecutionError(UniYieldError):
    """A step reverted, the wallet rejected a signature, or the engine threw.

    The attempt is abandoned. `recovery` names the documented fallback the
    user may start manually; nothing is retried automatically.
    """

    user_message = "Deposit failed"
    retryable = True

    def __init__(
        self,
        message: str | None = None,
        *,
        recovery: str | None = RECOVERY_BRIDGE_TO_SELF,
    ) -> None:
        super().__init__(message)
        self.recovery = recovery
