from __future__ import annotations


class GoDutchError(ValueError):
    """Base class for ledger rule violations. Handlers show the message as is."""


class InvalidExpense(GoDutchError):
    pass


class InvalidMeeting(GoDutchError):
    pass


class DuplicateMember(GoDutchError):
    pass


class InvalidUser(GoDutchError):
    pass
