"""
Error taxonomy shared by the services and the HTTP layer.

Every error carries a human readable ``message`` (rendered as the single
``error`` field of a response), a stable ``code`` and the HTTP status class
it maps to.
"""


class AppError(Exception):
    code = "INTERNAL"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    code = "VALIDATION"
    status_code = 400
    default_message = "Invalid request"


class InvalidName(ValidationError):
    code = "INVALID_NAME"
    default_message = "Invalid team name"


class MissingField(ValidationError):
    code = "MISSING_FIELD"
    default_message = "Required field is missing"


class InvalidWalletAddress(ValidationError):
    code = "INVALID_WALLET_ADDRESS"
    default_message = "Invalid wallet address"


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Resource already exists"


class DuplicateTeamName(ConflictError):
    code = "DUPLICATE_NAME"
    default_message = "A team with this name already exists"


class DuplicateSlug(ConflictError):
    code = "DUPLICATE_SLUG"
    default_message = "Unable to generate unique slug. Please try a different team name."


class AlreadyMember(ConflictError):
    code = "ALREADY_MEMBER"
    default_message = "Already a member"


class AllocationExhausted(AppError):
    # kept apart from ConflictError: a collision storm, not a lost race
    code = "SLUG_EXHAUSTED"
    status_code = 409
    default_message = "Unable to generate unique slug. Please try a different team name."


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"


class AuthorizationError(AppError):
    code = "UNAUTHORIZED"
    status_code = 403
    default_message = "Not authorized to act on behalf of this team"


class AuthorizationCheckFailed(AuthorizationError):
    default_message = "Unable to verify team permissions"


class UpstreamError(AppError):
    code = "UPSTREAM_FAILURE"
    status_code = 500
    default_message = "Failed to generate wallet"


class ProvisioningFailed(UpstreamError):
    pass


class InternalError(AppError):
    pass


class IdentityLookupFailed(InternalError):
    default_message = "Authentication failed"
