"""Exceptions raised by the migration engine."""

from __future__ import annotations


class MigrationError(Exception):
    """Base class for every failure the migration engine reports."""


class ValidationError(MigrationError):
    """A version string supplied by the operator or config is malformed."""


class ConsistencyError(MigrationError):
    """The stored version markers are inconsistent (more than one exists)."""


class UnknownVersionError(MigrationError):
    """An installed or requested version has no discoverable migration step."""


class StepNotFoundError(MigrationError):
    """The registry holds no migration step for a version."""


class VersionMismatchError(MigrationError):
    """The installed version differs from the version this server expects."""


class MissingTransformationError(MigrationError):
    """A migration step lacks the transformation required by the plan direction.

    Attributes:
        version: Version string of the offending step.
        direction: ``"up"`` or ``"down"``.
    """

    def __init__(self, version: str, direction: str) -> None:
        self.version = version
        self.direction = direction
        super().__init__(
            f"Migration step {version} has no '{direction}' transformation"
        )


class StepExecutionError(MigrationError):
    """A migration step's own transformation raised.

    The original exception is kept unmodified in ``original`` and chained as
    ``__cause__``; its message is reused verbatim.

    Attributes:
        version: Version string of the failing step.
        direction: ``"up"`` or ``"down"``.
        original: The exception raised by the transformation.
    """

    def __init__(self, version: str, direction: str, original: BaseException) -> None:
        self.version = version
        self.direction = direction
        self.original = original
        super().__init__(str(original))
