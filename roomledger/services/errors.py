"""Exception classes raised at the data-store boundary.

The ledger calculations never raise for well-formed rows; everything here is
produced by LedgerStore while talking to the database or validating input.
Odd but valid results (a negative deposit balance, a zero-amount payment
counted as unpaid) are not errors.
"""


class LedgerError(Exception):
    """Base exception for record-keeping errors."""

    pass


class DataFetchError(LedgerError):
    """The database is unreachable or a query/commit failed."""

    pass


class ValidationError(LedgerError):
    """Caller-supplied input violates a store constraint.

    The message is meant to be shown to the operator verbatim.
    """

    pass


class NotFoundError(LedgerError):
    """A room or tenant addressed by id does not exist."""

    pass


__all__ = ["LedgerError", "DataFetchError", "ValidationError", "NotFoundError"]
