"""Load-time errors raised while normalizing raw datasets.

Both are fatal: the caller gets no partial dataset back and must treat
them as startup failures.
"""


class DatasetError(Exception):
    """Base class for fatal dataset errors."""

    pass


class InvalidDatasetError(DatasetError):
    """Raised when the raw dataset root is not a JSON object."""

    pass


class UnsupportedFormatError(DatasetError):
    """Raised when the raw dataset matches none of the supported shapes."""

    pass
