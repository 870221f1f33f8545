"""Domain exceptions raised by the farm sales engine."""


class BusinessRuleViolation(Exception):
    """Raised when a requested operation violates a domain constraint."""


class MissingReferenceError(BusinessRuleViolation):
    """Raised when a referenced customer or record is unknown."""


class CustomerNotFoundError(MissingReferenceError):
    """Raised when an address book lookup finds no matching customer."""


class DuplicateCustomerError(BusinessRuleViolation):
    """Raised when a customer is already present in the address book."""


class InvalidStockRequestError(BusinessRuleViolation):
    """Raised when an inventory cannot service a multi-unit request."""


class FailedTransactionError(BusinessRuleViolation):
    """Base class for failures in the transaction lifecycle."""


class TransactionConflictError(FailedTransactionError):
    """Raised when opening a transaction while another one is ongoing."""


class NoOpenTransactionError(FailedTransactionError):
    """Raised when a transaction operation needs an ongoing transaction."""


class TransactionFinalisedError(FailedTransactionError):
    """Raised when finalising a transaction that is already finalised."""


class EmptyHistoryError(BusinessRuleViolation, LookupError):
    """Raised when querying a transaction history that has no records."""
