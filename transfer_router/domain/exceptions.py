"""Domain-specific exceptions

These are fatal faults. Expected business outcomes (past deadline,
insufficient funds, no path) are returned as RoutingError values instead.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class StructuralValidationError(DomainException):
    """Accounts, transfer matrix or goal are malformed"""

    def __init__(self, subject: str, errors: list[str]):
        self.subject = subject
        self.errors = errors
        super().__init__(f"Invalid {subject}: {', '.join(errors)}")


class UnknownTransferSpeedError(DomainException):
    """Transfer speed has no arrival estimator"""

    pass


class MissingPathError(DomainException):
    """An account selected for a route has no discovered path to the target"""

    pass


class EmptyRouteSetError(DomainException):
    """Route selection was asked to choose from no candidates"""

    pass


class InvalidSnapshotError(DomainException):
    """Account/transfer-rule snapshot document is malformed"""

    pass


class TransferDataAPIError(DomainException):
    """Transfer data service returned an error or is unavailable"""

    pass
