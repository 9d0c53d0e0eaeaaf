from typing import Optional


class ZoneError(Exception):
    """Fatal error while reading trust anchors"""

    def __init__(
        self,
        message: str,
        lineno: Optional[int] = None,
        filename: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.lineno = lineno
        self.filename = filename

    def __str__(self) -> str:
        if self.lineno is None:
            if self.filename:
                return f"{self.filename}: {self.message}"
            return self.message
        return f"{self.filename or '-'}:{self.lineno}: {self.message}"


class MalformedTTLError(ZoneError):
    pass


class UnknownClassError(ZoneError):
    pass


class UnknownRecordTypeError(ZoneError):
    pass


class ZoneSyntaxError(ZoneError):
    pass


class UnterminatedQuoteError(ZoneError):
    pass


class UnterminatedParenthesisError(ZoneError):
    pass


class NestedParenthesisError(ZoneError):
    pass


class UnmatchedParenthesisError(ZoneError):
    pass


class Base64Error(ZoneError):
    pass


class InvalidBase64SymbolError(Base64Error):
    pass


class TruncatedBase64Error(Base64Error):
    pass


class RecordDataError(ZoneError):
    pass


class ResolverConfigError(ZoneError):
    pass


class EncodingError(ZoneError):
    pass
