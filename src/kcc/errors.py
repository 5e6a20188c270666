"""Error kinds raised by the kcc library layer.

Every failure to obtain or persist data is a :class:`KccError`.  The CLI
turns these into a single ``error:`` line and exit code 1.  A flag that is
missing or unknown is a check result, not an error.
"""


class KccError(RuntimeError):
    """Base class for fatal kcc errors."""


class NotFoundError(KccError):
    """A declared input path does not exist."""


class ReadError(KccError):
    """An input file could not be read or decoded."""


class DecompressionError(KccError):
    """The decompression facility failed or is unavailable."""


class WriteError(KccError):
    """The mutated config could not be written back."""


class UsageError(KccError):
    """The invocation is inconsistent (no flags, conflicting modes, bad config)."""
