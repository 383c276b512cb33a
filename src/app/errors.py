"""
Infrastructure failures raised by adapters.

Expected business failures travel as ``Result`` errors; these exceptions
cover collaborators that could not do their job (database down, SMTP
refusing, timeouts).
"""


class PersistenceError(Exception):
    """A repository or unit-of-work operation failed."""


class AccountLookupError(PersistenceError):
    """The account store could not be queried."""


class TokenStoreError(PersistenceError):
    """The reset-token store could not be read or written."""


class EmailDispatchError(Exception):
    """The email transport gave up on a message."""
