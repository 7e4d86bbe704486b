"""Domain errors raised by reconciliation services."""


class CardOpsError(Exception):
    """Base class for reconciliation domain errors."""


class RowExtractionError(CardOpsError):
    """Required identity fields are missing from a spreadsheet row."""


class DuplicateRecordError(CardOpsError):
    """Row identity collides with a stored proposal or an earlier row in the batch."""

    def __init__(self, unique_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Duplicate record {unique_id}")
        self.unique_id = unique_id


class TransactionError(CardOpsError):
    """The batch transaction could not be completed and was rolled back."""


class AlreadyResolvedError(CardOpsError):
    """A validation issue was already resolved."""


class NotFoundError(CardOpsError):
    """A referenced proposal, issue, or operator does not exist."""
