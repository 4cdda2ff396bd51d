"""Custom exceptions for receipt-scanner.

The parsing pipeline never raises; these errors belong to the scan flow
around it (credentials, image loading, the model call).
"""


class ReceiptScannerError(Exception):
    """Base exception for all receipt-scanner errors."""

    pass


class ConfigurationError(ReceiptScannerError):
    """Raised when the scanner is missing credentials or a client."""

    pass


class ScanError(ReceiptScannerError):
    """Raised when a receipt scan cannot be completed."""

    def __init__(
        self,
        message: str,
        raw_response: str | None = None,
        last_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.raw_response = raw_response
        self.last_error = last_error


class ImageError(ScanError):
    """Raised when the receipt image is missing or unreadable."""

    pass


class LLMError(ScanError):
    """Raised when the model call fails or returns no content."""

    pass
