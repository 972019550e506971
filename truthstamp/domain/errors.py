"""Error taxonomy for protocol operations.

Every error aborts the whole operation; the ledger transaction wrapping the
call discards any mutation made before the failure.
"""


class ProtocolError(Exception):
    """Base class for all protocol errors."""

    code = "PROTOCOL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(ProtocolError):
    """Caller did not authorize the call or is not the trusted partner."""

    code = "FORBIDDEN_NOT_AUTHORIZED"


class AlreadyInitializedError(ProtocolError):
    """Component configuration already exists."""

    code = "CONFLICT_ALREADY_INITIALIZED"


class AlreadyRegisteredError(ProtocolError):
    """Expert identity is already registered."""

    code = "CONFLICT_ALREADY_REGISTERED"


class NotFoundError(ProtocolError):
    """Claim, expert, review, consensus or configuration is absent."""

    code = "NOT_FOUND_RESOURCE"


class ValidationError(ProtocolError):
    """Input rejected before any state was touched."""

    code = "VALIDATION_INVALID_VALUE"


class StakeTooLowError(ValidationError):
    """Registration stake is below the General tier threshold."""

    code = "VALIDATION_STAKE_TOO_LOW"


class DuplicateReviewError(ValidationError):
    """Expert already reviewed the claim."""

    code = "VALIDATION_DUPLICATE_REVIEW"


class StatusRegressionError(ValidationError):
    """Claim status update would move the lifecycle backwards."""

    code = "VALIDATION_STATUS_REGRESSION"


class DistributionArithmeticError(ProtocolError, ArithmeticError):
    """Reward distribution would divide by a zero winning stake."""

    code = "CONFLICT_ZERO_WINNING_STAKE"
