"""
Custom exception hierarchy for httpreq.

Every error raised by the library derives from ``HttpReqError``.  Per-field
failures raised while a ``ParsingMap`` runs derive from ``ConversionError``
and come in two flavours:

- ``WrongDestinationType``: the declared conversion does not match the
  destination's kind.  A programmer error, normally caught in tests.
- ``MalformedValue``: the raw text cannot be parsed as the target type.
  A data error, expected at runtime on untrusted input.
"""

from __future__ import annotations


class HttpReqError(Exception):
    """Base exception for all httpreq errors."""


class ConversionError(HttpReqError):
    """Raised when a single field cannot be converted into its destination.

    Attributes:
        conversion: Name of the conversion that failed (e.g. ``"int"``).
        key: Source key of the failing field.  ``None`` when the conversion
            was called directly rather than through ``ParsingMap.parse()``.
    """

    def __init__(self, message: str, *, conversion: str = "", key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.conversion = conversion
        self.key = key

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"field {self.key!r}: {self.message}"


class WrongDestinationType(ConversionError):
    """Raised when a destination handle is not of the kind a conversion expects.

    Raised before the raw value is looked at, so the outcome never depends
    on the input text.
    """

    def __init__(
        self,
        expected: tuple[object, ...],
        actual: object,
        *,
        conversion: str = "",
        key: str | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        wanted = " or ".join(str(e) for e in expected)
        super().__init__(
            f"wrong destination type for {conversion or 'conversion'}: "
            f"expected {wanted}, got {actual}",
            conversion=conversion,
            key=key,
        )


class MalformedValue(ConversionError):
    """Raised when a raw value cannot be parsed as the destination's type.

    The underlying parse failure is available as ``cause`` (and as
    ``__cause__`` when raised with ``raise ... from``).
    """

    def __init__(
        self,
        raw: str,
        cause: BaseException | None = None,
        *,
        conversion: str = "",
        key: str | None = None,
    ) -> None:
        self.raw = raw
        self.cause = cause
        message = f"invalid {conversion or 'value'} value {raw!r}"
        if cause is not None and str(cause):
            message = f"{message}: {cause}"
        super().__init__(message, conversion=conversion, key=key)


class ConfigValidationError(HttpReqError):
    """Raised when a declarative field map fails validation.

    This can happen if:
    - The YAML file is empty.
    - A field targets an attribute the record does not have.
    """


class UnknownConversionError(HttpReqError, KeyError):
    """Raised when a conversion name is not registered."""

    def __str__(self) -> str:
        return Exception.__str__(self)
