"""Symbol-layer exceptions."""


class SymbolError(Exception):
    """Base class for symbol helper errors."""

    pass


class SymbolDisplayError(SymbolError):
    """Raised when a symbol has no display form.

    Local variables, parameters and other symbols that never enclose a type
    cannot be rendered as a qualified-name segment.
    """

    pass


class QualifiedNameError(SymbolError):
    """Raised in strict mode when a qualified name could not be completed."""

    def __init__(self, message: str, partial_name: str):
        super().__init__(message)
        self.partial_name = partial_name
