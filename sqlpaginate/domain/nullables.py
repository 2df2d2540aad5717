"""
Scan destinations for the row buffer.

A slot receives exactly one column value of one physical row. Drivers hand
back whatever their wire protocol produces (MySQL drivers, for example, may
return ``bytes`` for numbers), so every slot normalizes the raw value to the
Python type of the record field it feeds.

Slots created for ``Optional[...]`` fields keep SQL NULL as ``None``. Slots for
plain fields turn NULL into the zero value of the field type instead of
failing, so an unexpectedly NULL column never breaks a scan.
"""

from __future__ import annotations

import abc
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, ClassVar, Dict, Optional, Type

from sqlpaginate.errors import ScanError

_TRUE_STRINGS = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "false", "FALSE", "False"})


def _text(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8")
    if isinstance(value, str):
        return value
    return None


class ScanSlot(abc.ABC):
    """
    Destination for one column value.

    Parameters
    ----------
    nullable : bool
        Whether the record field accepts ``None``.
    on_error : callable, optional
        Invoked before a conversion error is raised.
    """

    zero: ClassVar[Any] = None
    type_name: ClassVar[str] = ""

    def __init__(self, nullable: bool = True, on_error: Optional[Callable[[], None]] = None) -> None:
        self.nullable = nullable
        self.valid = False
        self.scanned = False
        self._on_error = on_error
        self._value: Any = None

    def scan(self, value: Any) -> None:
        """Store one raw driver value, converting it to the slot type."""
        if value is None:
            self._value, self.valid = None, False
        else:
            try:
                self._value = self._convert(value)
            except (ScanError, ValueError, TypeError) as exc:
                if self._on_error is not None:
                    self._on_error()
                if isinstance(exc, ScanError):
                    raise
                raise ScanError(f"column is not {self.type_name}: {value!r}") from exc
            self.valid = True
        self.scanned = True

    @property
    def value(self) -> Any:
        """The scanned value, ``None`` or the zero value when the column was NULL."""
        if self.valid:
            return self._value
        return None if self.nullable else self.zero

    def _fail(self) -> ScanError:
        return ScanError(f"column is not {self.type_name}")

    @abc.abstractmethod
    def _convert(self, value: Any) -> Any:  # pragma: no cover - interface only
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.value!r}, valid={self.valid})"


class NullInt(ScanSlot):
    zero = 0
    type_name = "int"

    def _convert(self, value: Any) -> int:
        if isinstance(value, bool):
            raise self._fail()
        if isinstance(value, int):
            return value
        if isinstance(value, float) and not value.is_integer():
            raise self._fail()
        if isinstance(value, Decimal) and value != value.to_integral_value():
            raise self._fail()
        if isinstance(value, (float, Decimal)):
            return int(value)
        text = _text(value)
        if text is None:
            raise self._fail()
        return int(text)


class NullBool(ScanSlot):
    zero = False
    type_name = "boolean"

    def _convert(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            text = str(value)
        else:
            text = _text(value)
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise self._fail()


class NullString(ScanSlot):
    zero = ""
    type_name = "string"

    def _convert(self, value: Any) -> str:
        text = _text(value)
        if text is not None:
            return text
        # Scalars a driver may return for a text column are rendered as text.
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (date, time)):
            return value.isoformat()
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        raise self._fail()


class NullTime(ScanSlot):
    zero = datetime.min
    type_name = "timestamp"

    def _convert(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        text = _text(value)
        if text is None:
            raise self._fail()
        return datetime.fromisoformat(text)


class NullFloat(ScanSlot):
    zero = 0.0
    type_name = "float"

    def _convert(self, value: Any) -> float:
        if isinstance(value, bool):
            raise self._fail()
        if isinstance(value, (int, float, Decimal)):
            return float(value)
        text = _text(value)
        if text is None:
            raise self._fail()
        return float(text)


class CountSlot(NullInt):
    """Receives the ``count(*) over()`` column and reports it to ``on_count``."""

    def __init__(
        self,
        on_count: Callable[[int], None],
        on_error: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(nullable=False, on_error=on_error)
        self._on_count = on_count

    def scan(self, value: Any) -> None:
        super().scan(value)
        self._on_count(self.value)


# Python field type -> slot class.
SLOT_TYPES: Dict[type, Type[ScanSlot]] = {
    str: NullString,
    int: NullInt,
    bool: NullBool,
    float: NullFloat,
    datetime: NullTime,
}


def zero_value(kind: type, nullable: bool) -> Any:
    """Zero value of a supported field type."""
    if nullable:
        return None
    return SLOT_TYPES[kind].zero


__all__ = [
    "ScanSlot",
    "NullInt",
    "NullBool",
    "NullString",
    "NullTime",
    "NullFloat",
    "CountSlot",
    "SLOT_TYPES",
    "zero_value",
]
