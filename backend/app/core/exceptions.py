"""Domain exceptions raised by the service layer.

All of them subclass ``ValueError`` so endpoints can keep the usual
``except ValueError`` → 400 fallback and only special-case the ones that
map to a different status code.
"""

from __future__ import annotations


class NotFoundError(ValueError):
    """A referenced row does not exist (or is not visible to the caller)."""


class ConflictError(ValueError):
    """The request clashes with existing data (duplicate name, rows in use)."""


class PermissionDeniedError(ValueError):
    """The acting user may not touch this row."""


class LedgerError(ValueError):
    """A ledger posting could not be applied."""
