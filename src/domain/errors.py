"""Domain error types raised by pure invoice logic."""


class DomainError(ValueError):
    """Base class for domain-level errors."""


class ValidationError(DomainError):
    """Invalid input rejected before any computation or storage access."""


class NotFoundError(DomainError):
    """Referenced entity does not exist."""


class ChildNotFoundError(NotFoundError):
    """A desired child carries an identity unknown to its invoice."""

    def __init__(self, invoice_id: int, child_id: str):
        self.invoice_id = invoice_id
        self.child_id = child_id
        super().__init__(f"Child {child_id} not found on invoice {invoice_id}")


class ConflictError(DomainError):
    """Concurrent modification or uniqueness conflict; safe to retry."""
