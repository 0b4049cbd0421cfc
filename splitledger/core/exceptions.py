"""
Domain exceptions.

Validation errors are raised before any write is attempted and carry a
``rule`` code so callers can report the specific failing rule. Repository
errors wrap storage failures; their messages are safe to show to users and
never include driver details.
"""


class SplitLedgerError(Exception):
    """Base exception for the service."""
    pass


# ===== VALIDATION =====

class ValidationError(SplitLedgerError):
    """Input rejected by the allocator or the settlement recorder."""
    rule = "invalid_input"
    default_message = "Invalid input"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class AmountMismatch(ValidationError):
    """Custom split amounts do not add up to the expense total."""
    rule = "amount_mismatch"
    default_message = "Amounts don't match the expense total"


class PercentageMismatch(ValidationError):
    """Percentage split does not add up to 100."""
    rule = "percentage_mismatch"
    default_message = "Percentages must total 100%"


class InvalidAmount(ValidationError):
    """Amount is not a finite positive number."""
    rule = "invalid_amount"
    default_message = "Please enter a valid amount"


class EmptyParticipantSet(ValidationError):
    """No participants selected for a split."""
    rule = "empty_participant_set"
    default_message = "Please select at least one member to split with"


class SameParty(ValidationError):
    """Payer and receiver of a settlement are the same member."""
    rule = "same_party"
    default_message = "Payer and receiver must be different members"


class NotGroupMember(ValidationError):
    """Referenced member does not belong to the group."""
    rule = "not_group_member"
    default_message = "Member does not belong to this group"


class InvalidStateTransition(ValidationError):
    """Settlement cannot move to the requested status."""
    rule = "invalid_state_transition"
    default_message = "Invalid state transition for settlement"


# ===== REPOSITORY =====

class RepositoryError(SplitLedgerError):
    """Storage failure surfaced from a repository."""
    default_message = "Storage operation failed, try again"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class RepositoryReadError(RepositoryError):
    default_message = "Failed to load data, try again"


class RepositoryWriteError(RepositoryError):
    default_message = "Failed to save data, try again"


class NotFoundError(RepositoryError):
    default_message = "Not found"
