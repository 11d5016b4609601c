"""Re-indentation services package."""

from ppindent.services.reindenter import (
    Reindenter,
    ReindentError,
    UnsupportedFileError,
    get_reindenter
)

__all__ = [
    'Reindenter',
    'ReindentError',
    'UnsupportedFileError',
    'get_reindenter'
]
