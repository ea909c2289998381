"""
Error types raised while resolving, fetching and merging monster records.
"""


class StatBlockError(Exception):
    """Base class for all statblock errors."""
    pass


class NotFound(StatBlockError):
    """Raised when a name search returns no candidates."""
    pass


class FetchFailed(StatBlockError):
    """Raised when the search or the record request does not succeed."""
    pass


class MissingRecordIdentity(StatBlockError):
    """Raised when a merge is attempted without a monster record."""
    pass


class TemplateError(StatBlockError):
    """Raised when a stat block template cannot be loaded."""
    pass
