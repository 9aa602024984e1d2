"""Sequential and seekable DBF record reader."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from dbfreader.dbf.constants import DATA_DELETED, DATA_ENDED, DELETION_FLAG_SIZE
from dbfreader.dbf.decoders import Value, decode_record
from dbfreader.dbf.header import Header
from dbfreader.dbf.row import Row
from dbfreader.errors import (
    ClosedError,
    DbfError,
    DbfIOError,
    IndexOutOfRangeError,
    SeekUnsupportedError,
)

logger = logging.getLogger(__name__)

Source = Union[str, Path, BinaryIO]


class DbfReader:
    """Reader over a DBF byte source.

    Opening parses the header and positions the source at the first record.
    ``next_record()`` then yields live records in file order, skipping deleted
    ones, and returns None once the 0x1A marker or the end of the source is
    reached. Sources opened from a path, or file objects reporting
    ``seekable()``, also support ``seek_to_record()``.

    Not thread safe: use one reader per thread.
    """

    def __init__(self, source: Source, encoding: str = "cp1252"):
        self.encoding = encoding
        self.name = _source_name(source)
        self._stream: Optional[BinaryIO] = None
        self._exhausted = False
        self._position = 0       # Zero-based index of the record under the cursor
        self.records_read = 0    # Live records returned so far
        self.deleted_count = 0   # Deleted records skipped so far

        try:
            if isinstance(source, (str, Path)):
                self._stream = open(source, "rb")
            else:
                self._stream = source
            self._seekable = _is_seekable(self._stream)
            self.header = Header.parse(self._stream)
            self._skip(self.header.padding_length)
        except OSError as e:
            self.close()
            raise DbfIOError(f"Cannot open DBF {self.name}: {e}") from e
        except DbfError:
            self.close()
            raise

        # Records may carry trailing bytes beyond the declared fields
        self._body_length = self.header.record_stride - DELETION_FLAG_SIZE

        logger.debug(
            "Opened %s: %d fields, %d records, header %d bytes, record %d bytes",
            self.name, self.header.field_count, self.header.record_count,
            self.header.header_length, self.header.record_length,
        )

    # -- Context / iteration --

    def __enter__(self) -> DbfReader:
        return self

    def __exit__(self, *args):
        self.close()

    def __iter__(self) -> Iterator[list[Value]]:
        while True:
            values = self.next_record()
            if values is None:
                return
            yield values

    def __repr__(self) -> str:
        state = "closed" if self.closed else ("exhausted" if self._exhausted else "open")
        return f"<DbfReader {self.name} {state} records={self.record_count}>"

    # -- Properties --

    @property
    def closed(self) -> bool:
        return self._stream is None

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def record_count(self) -> int:
        return self.header.record_count

    # -- Reading --

    def next_record(self) -> Optional[list[Value]]:
        """Return the next live record's values in field order, or None at end of data."""
        stream = self._require_open()
        if self._exhausted:
            return None

        try:
            while True:
                flag = stream.read(1)
                if not flag or flag[0] == DATA_ENDED:
                    return self._finish()
                if flag[0] != DATA_DELETED:
                    break
                # Deleted: drop the rest of the record and try the next one
                if len(stream.read(self._body_length)) < self._body_length:
                    return self._finish()
                self.deleted_count += 1
                self._position += 1

            body = stream.read(self._body_length)
        except OSError as e:
            raise DbfIOError(f"Cannot read next record from {self.name}: {e}", record=self._position) from e

        if len(body) < self._body_length:
            # Truncated last record: same as a missing end marker
            return self._finish()

        # The body is consumed, so the cursor moves on even if decoding fails
        position = self._position
        self._position += 1
        try:
            values = decode_record(self.header.fields, body)
        except DbfError as e:
            if e.record is None:
                e.record = position
            raise

        self.records_read += 1
        return values

    def next_row(self) -> Optional[Row]:
        """Like ``next_record()`` but wraps the values in a Row."""
        values = self.next_record()
        if values is None:
            return None
        return Row(self.header, values, self.encoding)

    def rows(self) -> Iterator[Row]:
        """Iterate the remaining live records as Row views."""
        for values in self:
            yield Row(self.header, values, self.encoding)

    def _finish(self) -> None:
        if not self._exhausted:
            self._exhausted = True
            logger.debug(
                "End of data in %s: %d live, %d deleted",
                self.name, self.records_read, self.deleted_count,
            )
        return None

    # -- Seeking --

    def can_seek(self) -> bool:
        """True if ``seek_to_record()`` is supported by the underlying source."""
        return not self.closed and self._seekable

    def seek_to_record(self, n: int) -> None:
        """Position the cursor so the next ``next_record()`` reads record ``n``.

        The target is not checked for a deletion flag; if record ``n`` is
        deleted the following read skips forward to the next live one.
        """
        stream = self._require_open()
        if not self._seekable:
            raise SeekUnsupportedError(f"Seeking is not supported by {self.name}")
        if n < 0 or n >= self.header.record_count:
            raise IndexOutOfRangeError(
                f"Record index out of range [0, {self.header.record_count}): {n}", record=n
            )

        offset = self.header.record_offset(n)
        try:
            stream.seek(offset)
        except OSError as e:
            raise DbfIOError(
                f"Failed to seek to record {n} of {self.header.record_count}: {e}", record=n
            ) from e

        self._position = n
        self._exhausted = False
        logger.debug("Seek %s to record %d (offset %d)", self.name, n, offset)

    # -- Lifecycle --

    def close(self) -> None:
        """Release the source. Safe to call more than once."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()

    def _require_open(self) -> BinaryIO:
        if self._stream is None:
            raise ClosedError(f"DBF reader for {self.name} is closed")
        return self._stream

    def _skip(self, count: int) -> None:
        """Advance past ``count`` bytes without requiring a seekable source."""
        if count > 0:
            self._stream.read(count)


def open_dbf(source: Source, encoding: str = "cp1252") -> DbfReader:
    """Open a DBF file path or binary file object."""
    return DbfReader(source, encoding=encoding)


def _source_name(source: Source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, "name", "<stream>"))


def _is_seekable(stream: BinaryIO) -> bool:
    try:
        return bool(stream.seekable())
    except (AttributeError, io.UnsupportedOperation, ValueError):
        return False


def main():
    """Quick test: print header info and the first rows of a DBF file."""
    import sys
    if len(sys.argv) < 2:
        print("Usage: python -m dbfreader.dbf.reader <path/to/file.dbf>")
        sys.exit(1)

    path = Path(sys.argv[1])
    with DbfReader(path) as reader:
        header = reader.header
        print(f"{path.name}: {header.record_count:,} records, {header.field_count} fields\n")
        for f in header.fields:
            print(f"  {f.index:>3}  {f.name:<11} {f.type_tag}  {f.length:>3}.{f.decimal_count}")

        print()
        for i, row in enumerate(reader.rows()):
            if i >= 10:
                break
            print(f"  {row.as_dict()}")


if __name__ == "__main__":
    main()
