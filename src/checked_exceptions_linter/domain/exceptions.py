"""Domain exceptions."""


class CheckedExceptionsError(Exception):
    """Base class for errors raised by the checked-exceptions linter."""


class AnnotationSyntaxError(CheckedExceptionsError):
    """Raised by the strict annotation parser on malformed docstring markup."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at offset {position}")
        self.position = position


class UnknownTransformationError(CheckedExceptionsError):
    """Raised by the fixer gateway for a plan it cannot interpret."""
