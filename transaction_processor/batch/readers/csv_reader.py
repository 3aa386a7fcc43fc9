"""
CSV reader turning an uploaded byte stream into raw rows.
"""

import codecs
import csv
from collections.abc import Iterator
from typing import BinaryIO

from transaction_processor.core.errors import MalformedInput
from transaction_processor.core.models import RawRecord


class CSVReader:
    """
    Reads delimited text with a header row into column -> value mappings.

    Reading is lazy: rows are decoded and yielded one at a time, and each
    call to read() starts a fresh pass. Short rows simply lack the trailing
    columns; surplus values are kept under positional keys ("_3" for the
    fourth column). Row-level defects are left for the classifier.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
            encoding: Text encoding of the stream (the default drops a UTF-8 BOM)
        """
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
        codecs.lookup(encoding)

        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, stream: BinaryIO) -> Iterator[RawRecord]:
        """
        Read rows from a binary stream.

        Args:
            stream: Readable binary stream positioned at the header row

        Yields:
            One RawRecord per non-blank data row, in file order

        Raises:
            MalformedInput: If no header row can be read, the bytes cannot be
                decoded, or the stream fails with an I/O error
        """
        lines = codecs.iterdecode(stream, self.encoding)
        reader = csv.reader(lines, delimiter=self.delimiter)

        try:
            header = self._read_header(reader)
            for row in reader:
                if not row:
                    continue
                yield self._to_record(header, row)
        except UnicodeDecodeError as e:
            raise MalformedInput(f"Stream is not valid {self.encoding} text: {e}") from e
        except csv.Error as e:
            raise MalformedInput(f"Stream is not valid delimited text: {e}") from e
        except OSError as e:
            raise MalformedInput(f"Failed to read stream: {e}") from e

    def read_all(self, stream: BinaryIO) -> list[RawRecord]:
        """Read every row into a list."""
        return list(self.read(stream))

    @staticmethod
    def _read_header(reader) -> list[str]:
        for row in reader:
            if not row:
                continue
            header = [name.strip() for name in row]
            if not any(header):
                raise MalformedInput("Header row has no column names")
            return header
        raise MalformedInput("Stream ended before a header row could be read")

    @staticmethod
    def _to_record(header: list[str], row: list[str]) -> RawRecord:
        record = dict(zip(header, row))
        for index in range(len(header), len(row)):
            record[f"_{index}"] = row[index]
        return record
