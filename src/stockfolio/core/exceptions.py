"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class LastAccountError(AppError):
    """Raised when attempting to delete the only remaining account."""

    def __init__(self, name: str):
        super().__init__(
            f"Cannot delete '{name}': at least one account must exist",
            code="LAST_ACCOUNT",
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, ticker: str, requested: float, available: float):
        super().__init__(
            f"Insufficient shares of {ticker}: requested {requested:g}, available {available:g}",
            code="INSUFFICIENT_SHARES",
        )


class TickerLookupError(AppError):
    """Raised when a ticker cannot be resolved while entering a transaction."""

    def __init__(self, ticker: str):
        super().__init__(
            f'Could not find a valid ticker for "{ticker}". '
            "Please check the symbol and try again.",
            code="TICKER_NOT_FOUND",
        )


class ImportFormatError(AppError):
    """Raised when an import file cannot be parsed into a known shape."""

    def __init__(self, message: str):
        super().__init__(message, code="IMPORT_FORMAT")


class NoPendingImportError(AppError):
    """Raised when confirming an import that was never staged."""

    def __init__(self):
        super().__init__("There is no staged import to confirm", code="NO_PENDING_IMPORT")


class MarketDataUnavailableError(Exception):
    """Raised by a provider when the market data source cannot be reached."""


class TickerNotFoundError(Exception):
    """Raised by a provider when the source reports that a symbol does not exist."""

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(f"Unknown ticker: {ticker}")
