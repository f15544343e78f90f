# opening_trainer/exceptions.py
"""
Defines custom exceptions for the Opening Trainer application.

Centralizing exceptions in this module prevents circular dependencies between
the parsing, catalog and session layers. All application errors share the
`OpeningTrainerError` base so callers at the outer edge (the trainer facade and
the CLI) can catch them in one place.
"""


class OpeningTrainerError(Exception):
    """Base class for all application-specific, catchable errors."""
    pass


class PgnError(OpeningTrainerError):
    """Base class for errors related to PGN (Portable Game Notation) handling."""
    pass


class PgnServiceError(PgnError):
    """
    Raised for file I/O errors when reading opening book sources.

    This typically wraps lower-level exceptions like `FileNotFoundError` or
    `UnicodeDecodeError`. The catalog loader catches it and degrades the
    affected opening to an empty variation set.
    """
    pass


class CatalogError(OpeningTrainerError):
    """Base class for errors raised while assembling the opening catalog."""
    pass


class CatalogEmptyError(CatalogError):
    """
    Raised when every source failed or yielded no usable variation.

    No variation can be selected until the catalog is reloaded successfully.
    """
    pass


class RulesEngineError(OpeningTrainerError):
    """
    Raised when the rules engine adapter is called incorrectly.

    An illegal move is not an error; the engine reports it by returning `None`.
    """
    pass
