"""
Unit tests for the CSV reader.
"""

import io

import pytest

from transaction_processor.batch.readers import CSVReader
from transaction_processor.core.errors import MalformedInput


class FailingStream(io.RawIOBase):
    """Binary stream whose reads fail after the header line"""

    def __init__(self):
        self._served = False

    def readable(self):
        return True

    def readline(self, size=-1):
        if not self._served:
            self._served = True
            return b"Account Name,Transaction Amount\n"
        raise OSError("connection reset")

    def __iter__(self):
        return self

    def __next__(self):
        return self.readline()


class TestCSVReader:
    """Tests for CSVReader"""

    def test_reads_rows_in_file_order(self):
        data = b"Account Name,Card Number,Transaction Amount\nAlice,1111,100\nBob,2222,-5\n"
        records = CSVReader().read_all(io.BytesIO(data))

        assert records == [
            {"Account Name": "Alice", "Card Number": "1111", "Transaction Amount": "100"},
            {"Account Name": "Bob", "Card Number": "2222", "Transaction Amount": "-5"},
        ]

    def test_read_is_lazy(self):
        data = b"a,b\n1,2\n3,4\n"
        rows = CSVReader().read(io.BytesIO(data))

        assert next(rows) == {"a": "1", "b": "2"}
        assert next(rows) == {"a": "3", "b": "4"}
        with pytest.raises(StopIteration):
            next(rows)

    def test_short_row_lacks_trailing_columns(self):
        data = b"Account Name,Card Number,Transaction Amount\nAlice,1111\n"
        records = CSVReader().read_all(io.BytesIO(data))

        assert records == [{"Account Name": "Alice", "Card Number": "1111"}]
        assert "Transaction Amount" not in records[0]

    def test_surplus_values_kept_under_positional_keys(self):
        data = b"a,b\n1,2,3,4\n"
        records = CSVReader().read_all(io.BytesIO(data))

        assert records == [{"a": "1", "b": "2", "_2": "3", "_3": "4"}]

    def test_quoted_fields_with_delimiters_and_newlines(self):
        data = b'Account Name,Description\n"Smith, J","line one\nline two"\n'
        records = CSVReader().read_all(io.BytesIO(data))

        assert records == [{"Account Name": "Smith, J", "Description": "line one\nline two"}]

    def test_blank_lines_skipped(self):
        data = b"\n\na,b\n\n1,2\n\n"
        assert CSVReader().read_all(io.BytesIO(data)) == [{"a": "1", "b": "2"}]

    def test_header_whitespace_and_bom_stripped(self):
        data = "\ufeff Account Name , Transaction Amount\r\nAlice,10\r\n".encode("utf-8")
        records = CSVReader().read_all(io.BytesIO(data))

        assert records == [{"Account Name": "Alice", "Transaction Amount": "10"}]

    def test_values_kept_verbatim(self):
        data = b"Account Name,Transaction Amount\n  Alice ,  10 \n"
        records = CSVReader().read_all(io.BytesIO(data))

        assert records == [{"Account Name": "  Alice ", "Transaction Amount": "  10 "}]

    def test_header_only_yields_no_rows(self):
        assert CSVReader().read_all(io.BytesIO(b"a,b\n")) == []

    def test_custom_delimiter(self):
        data = b"a;b\n1;2\n"
        assert CSVReader(delimiter=";").read_all(io.BytesIO(data)) == [{"a": "1", "b": "2"}]

    def test_each_read_starts_a_fresh_pass(self):
        reader = CSVReader()
        data = b"a\n1\n"

        assert reader.read_all(io.BytesIO(data)) == [{"a": "1"}]
        assert reader.read_all(io.BytesIO(data)) == [{"a": "1"}]

    def test_empty_stream_raises_malformed_input(self):
        with pytest.raises(MalformedInput, match="header"):
            CSVReader().read_all(io.BytesIO(b""))

    def test_blank_stream_raises_malformed_input(self):
        with pytest.raises(MalformedInput):
            CSVReader().read_all(io.BytesIO(b"\n\n\n"))

    def test_header_without_names_raises_malformed_input(self):
        with pytest.raises(MalformedInput, match="no column names"):
            CSVReader().read_all(io.BytesIO(b",,\n1,2,3\n"))

    def test_undecodable_bytes_raise_malformed_input(self):
        with pytest.raises(MalformedInput, match="utf-8"):
            CSVReader().read_all(io.BytesIO(b"a,b\n\xff\xfe,1\n"))

    def test_io_failure_raises_malformed_input(self):
        with pytest.raises(MalformedInput, match="connection reset"):
            CSVReader().read_all(FailingStream())

    def test_invalid_delimiter_rejected(self):
        with pytest.raises(ValueError):
            CSVReader(delimiter=";;")

    def test_unknown_encoding_rejected(self):
        with pytest.raises(LookupError):
            CSVReader(encoding="not-an-encoding")
