from __future__ import annotations

from typing import Any


class FormatError(ValueError):
    """Raised when a recurrence rule content line cannot be decoded."""

    def __init__(self, message: str, *, field: str | None = None, token: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.token = token

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "message": self.message,
            "field": self.field,
            "token": self.token,
        }


class NotARule(FormatError):
    """The content line carries a property other than RRULE."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Content line is not an RRULE but a {name}", token=name)


class MalformedField(FormatError):
    """A ``;``-separated part has no ``=``."""

    def __init__(self, part: str) -> None:
        super().__init__(f"RRULE part is missing '=': {part!r}", token=part)


class InvalidEntry(FormatError):
    """A member of a list-valued part failed to parse or is out of range."""

    def __init__(self, field: str, token: str, reason: str | None = None) -> None:
        message = f"Invalid entry in RRULE part {field}: {token!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, field=field, token=token)


class UnrecognizedToken(FormatError):
    """The value of a single-valued part is not acceptable."""

    def __init__(self, field: str, token: str, reason: str | None = None) -> None:
        message = f"Invalid value for RRULE part {field}: {token!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, field=field, token=token)


class OrdinalOutOfRange(InvalidEntry):
    def __init__(self, token: str, field: str = "BYDAY") -> None:
        super().__init__(field, token, "ordinal must be in range ±1–53")


class UnknownWeekDay(InvalidEntry):
    def __init__(self, token: str, code: str, accepted: list[str], field: str = "BYDAY") -> None:
        super().__init__(
            field,
            token,
            f"invalid day of week {code!r}; allowed values are {','.join(accepted)}",
        )
        self.code = code


class DuplicateField(FormatError):
    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Duplicate part while parsing RRULE: {field}", field=field)


class ConflictingUntilCount(DuplicateField):
    def __init__(self, field: str) -> None:
        super().__init__(
            field,
            f"Duplicate part while parsing RRULE: {field} (only one of UNTIL and COUNT may be set)",
        )


class MissingFrequency(FormatError):
    def __init__(self) -> None:
        super().__init__("Frequency was not provided in RRULE", field="FREQ")
