"""Exception hierarchy for pattern generation.

Every error is recoverable by the caller: fix the parameters or the image
and generate again. ``generate`` turns all of them into a failed
``GenerationResult`` instead of letting them escape.
"""


class BookfoldError(Exception):
    """Base exception for pattern generation errors."""
    pass


class InvalidParametersError(BookfoldError):
    """Generation parameters are missing or out of range."""
    pass


class DecodeError(BookfoldError):
    """The image source could not be loaded or decoded."""
    pass


class UnknownModeError(BookfoldError):
    """The requested fold mode does not exist.

    Deliberately not a ``ValueError``: Pydantic re-raises it untouched from
    field validators instead of folding it into a ``ValidationError``.
    """
    pass
