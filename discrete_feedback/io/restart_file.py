"""
An ordered, typed stream of values used to checkpoint the feedback model.

There are no field names: the order of the writes is the schema, and reads
must happen in the same order. Each record is a one-byte type tag followed by
a little-endian payload:

    b"d" + float64              a scalar
    b"b" + uint64 n + n bytes   an opaque blob (e.g. a serialised interpolator)

A stream starts with a fixed header so that foreign files are rejected early.

Example
-------
>>> with open("restart.bin", "wb") as f:
...     rfile = RestartFile(f, mode="w")
...     rfile.write(1.5)
>>> with open("restart.bin", "rb") as f:
...     RestartFile(f, mode="r").read()
1.5
"""

import sys
from typing import BinaryIO

import numpy as np

from ..utils.error_handling import RestoreFormatError

MAGIC = b"DSFBRST"
FORMAT_VERSION = 1

_DOUBLE_TAG = b"d"
_BLOB_TAG = b"b"
_DOUBLE = np.dtype("<f8")
_SIZE = np.dtype("<u8")


class RestartFile(object):
    """
    Wraps a binary file object for ordered reads or writes.

    Attributes
    ----------
    stream: BinaryIO
        The underlying file object, opened in binary mode.
    mode: str
        "w" to write, "r" to read.
    """

    def __init__(self, stream: BinaryIO, mode: str = "r"):
        if mode not in ("r", "w"):
            raise ValueError(f"Invalid mode '{mode}'. Must be one of 'r' or 'w'.")
        self.stream = stream
        self.mode = mode
        if mode == "w":
            self._write_header()
        else:
            self._read_header()

    def write(self, value: float) -> None:
        """Write a single float64 scalar."""
        self._check_mode("w")
        self.stream.write(_DOUBLE_TAG)
        self.stream.write(np.array([value], dtype=_DOUBLE).tobytes())

    def read(self) -> float:
        """Read a single float64 scalar."""
        self._check_mode("r")
        self._expect_tag(_DOUBLE_TAG, "scalar")
        payload = self._read_exact(_DOUBLE.itemsize, "scalar")
        return float(np.frombuffer(payload, dtype=_DOUBLE)[0])

    def write_blob(self, blob: bytes) -> None:
        """Write a length-prefixed opaque blob."""
        self._check_mode("w")
        self.stream.write(_BLOB_TAG)
        self.stream.write(np.array([len(blob)], dtype=_SIZE).tobytes())
        self.stream.write(bytes(blob))

    def read_blob(self) -> bytes:
        """Read a blob written with write_blob()."""
        self._check_mode("r")
        self._expect_tag(_BLOB_TAG, "blob")
        size = int(np.frombuffer(self._read_exact(_SIZE.itemsize, "blob size"), dtype=_SIZE)[0])
        if size > sys.maxsize:
            raise RestoreFormatError(f"Corrupt blob size {size} in restart file")
        return self._read_exact(size, "blob")

    def _write_header(self):
        self.stream.write(MAGIC)
        self.stream.write(np.array([FORMAT_VERSION], dtype=_SIZE).tobytes())

    def _read_header(self):
        magic = self._read_exact(len(MAGIC), "header")
        if magic != MAGIC:
            raise RestoreFormatError(f"Not a restart file (bad magic {magic!r})")
        version = int(np.frombuffer(self._read_exact(_SIZE.itemsize, "header"), dtype=_SIZE)[0])
        if version != FORMAT_VERSION:
            raise RestoreFormatError(
                f"Unsupported restart file version {version}, expected {FORMAT_VERSION}"
            )

    def _expect_tag(self, tag: bytes, what: str):
        found = self._read_exact(1, what)
        if found != tag:
            raise RestoreFormatError(
                f"Type mismatch in restart file: expected a {what} record "
                f"(tag {tag!r}), found tag {found!r}"
            )

    def _read_exact(self, size: int, what: str) -> bytes:
        data = self.stream.read(size)
        if data is None or len(data) != size:
            raise RestoreFormatError(
                f"Restart file ended early while reading {what} "
                f"({0 if data is None else len(data)} of {size} bytes)"
            )
        return data

    def _check_mode(self, mode: str):
        if self.mode != mode:
            raise ValueError(f"RestartFile opened with mode '{self.mode}' cannot do that")
