"""
Row buffering and the scan protocol.

Drivers deliver a result set one physical row at a time, while callers want
typed records afterwards. The RowBuffer sits in between:

1. before each row is read, ``get_scan_destinations()`` hands out one slot per
   column plus a trailing slot for the ``count(*) over()`` column;
2. the caller stores the row's values into those slots (``scan_row`` does it
   for a DB-API row tuple);
3. once every row has been scanned, ``has_next()`` / ``scan_into()`` pull the
   records back out in the order they were scanned.

A row only counts as complete when the next set of destinations is requested
or when draining begins. The buffer is single-use and not thread-safe.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional, Sequence

from pydantic import BaseModel

from sqlpaginate.domain.descriptor import RecordDescriptor
from sqlpaginate.domain.nullables import SLOT_TYPES, CountSlot, ScanSlot
from sqlpaginate.errors import ScanError
from sqlpaginate.utils.logging import get_logger

log = get_logger(__name__)


class RowBuffer:
    """
    Scan protocol state machine for one paginated query.

    Parameters
    ----------
    descriptor : RecordDescriptor
        Describes the record type the rows are turned into.
    on_total : callable
        Receives the running ``count(*) over()`` value.
    on_page_count : callable
        Receives the number of buffered rows when draining starts.
    """

    def __init__(
        self,
        descriptor: RecordDescriptor,
        on_total: Callable[[int], None],
        on_page_count: Callable[[int], None],
    ) -> None:
        self.descriptor = descriptor
        self._on_total = on_total
        self._on_page_count = on_page_count
        self.tmp: Optional[List[ScanSlot]] = None
        self.rows: Deque[Dict[str, Any]] = deque()
        self.started = False
        self.closed = False
        self.stop = False
        self.page_count = 0

    def _stop(self) -> None:
        self.stop = True

    def _fail(self, message: str) -> ScanError:
        self._stop()
        return ScanError(message)

    def _flush(self) -> None:
        """Fold the pending destinations into a completed row, if they hold data."""
        if self.tmp is not None and any(slot.scanned for slot in self.tmp):
            fields = self.descriptor.fields
            self.rows.append({f.name: slot.value for f, slot in zip(fields, self.tmp)})
        self.tmp = None

    def get_scan_destinations(self) -> List[ScanSlot]:
        """
        Prepare the destinations for the next physical row.

        Returns an empty list once draining has started.
        """
        if self.started:
            return []
        self._flush()
        slots: List[ScanSlot] = [
            SLOT_TYPES[f.kind](nullable=f.nullable, on_error=self._stop)
            for f in self.descriptor.fields
        ]
        slots.append(CountSlot(on_count=self._on_total, on_error=self._stop))
        self.tmp = slots
        return slots

    def scan_row(self, row: Sequence[Any]) -> None:
        """Store one DB-API row tuple into a fresh set of destinations."""
        destinations = self.get_scan_destinations()
        if not destinations:
            raise self._fail("cannot scan rows once draining has started")
        if len(row) != len(destinations):
            raise self._fail(
                f"row has {len(row)} values; expected {len(destinations)} "
                f"(columns plus count)"
            )
        for slot, value in zip(destinations, row):
            slot.scan(value)

    def has_next(self) -> bool:
        """Whether a completed row is waiting to be scanned into a record."""
        if self.stop or self.closed:
            return False
        self._flush()
        return len(self.rows) > 0

    def scan_into(self, dest: Optional[BaseModel]) -> None:
        """
        Copy the oldest completed row into ``dest`` and drop it from the buffer.

        ``dest`` must be a zero-valued instance of the exact record type. Any
        error stops the buffer for good.
        """
        if dest is None:
            raise self._fail("scan destination should not be None")
        if self.closed:
            raise self._fail("all rows have already been scanned; the buffer is closed")
        model = self.descriptor.model
        if type(dest) is not model:
            raise self._fail(
                f"scan destination should be a {model.__name__}; got {type(dest).__name__}"
            )
        if not self.descriptor.is_zero(dest):
            raise self._fail(f"scan destination should be a zero valued {model.__name__}")

        if not self.started:
            self._flush()
            self.started = True
            self.page_count = len(self.rows)
            self._on_page_count(self.page_count)
            log.debug("draining rows", extra={"rows": self.page_count})

        if not self.rows:
            raise self._fail("there are no rows to scan")

        row = self.rows.popleft()
        # Frozen records reject setattr; dest is a checked zero value of the exact type.
        assign = object.__setattr__ if model.model_config.get("frozen") else setattr
        try:
            for name, value in row.items():
                assign(dest, name, value)
        except (TypeError, ValueError) as exc:
            raise self._fail(f"cannot scan into {model.__name__}: {exc}") from exc

        if not self.rows:
            self.closed = True

    def records(self) -> Iterator[BaseModel]:
        """Yield every buffered row as a new record."""
        while self.has_next():
            record = self.descriptor.new_record()
            self.scan_into(record)
            yield record


__all__ = ["RowBuffer"]
