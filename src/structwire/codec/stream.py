"""Byte sink and byte source used by the schemes.

Both sides are big-endian. A sink writes either into an internal buffer or into
any binary file object; a source reads either from an in-memory buffer or from
a binary file object. Running out of data is always a DecodeError.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Optional, Union

from ..exceptions import DecodeError, EncodeError

BytesLike = Union[bytes, bytearray, memoryview]

# Largest single read issued against a stream. A length prefix never makes the
# source allocate more than this ahead of the bytes actually delivered.
_CHUNK_SIZE = 64 * 1024

_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_DOUBLE = struct.Struct(">d")


class ByteSink:
    """Writes primitive values as big-endian bytes.

    Example:
        >>> sink = ByteSink()
        >>> sink.write_i16(1)
        >>> sink.write_string("hi")
        >>> sink.getvalue()
        b'\\x00\\x01\\x00\\x00\\x00\\x02hi'
    """

    def __init__(self, stream: Optional[BinaryIO] = None) -> None:
        """Initialize a sink.

        Args:
            stream: Binary file object to write through to. When omitted the
                sink collects bytes in memory (see getvalue()).
        """
        self._stream = stream
        self._buffer = bytearray()
        self._written = 0

    def write_bytes(self, data: BytesLike) -> None:
        """Write raw bytes."""
        if self._stream is not None:
            self._stream.write(data)
        else:
            self._buffer.extend(data)
        self._written += len(data)

    def write_byte(self, value: int) -> None:
        """Write a single unsigned byte (0-255)."""
        if not 0 <= value <= 0xFF:
            raise EncodeError(f"Byte value must be 0-255, got {value}")
        self.write_bytes(bytes((value,)))

    def write_bool(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_i8(self, value: int) -> None:
        self.write_bytes(_pack(_I8, value))

    def write_i16(self, value: int) -> None:
        self.write_bytes(_pack(_I16, value))

    def write_i32(self, value: int) -> None:
        self.write_bytes(_pack(_I32, value))

    def write_i64(self, value: int) -> None:
        self.write_bytes(_pack(_I64, value))

    def write_double(self, value: float) -> None:
        self.write_bytes(_pack(_DOUBLE, value))

    def write_string(self, value: str) -> None:
        """Write a 4-byte length prefix followed by the UTF-8 bytes."""
        encoded = value.encode("utf-8")
        if len(encoded) > 0x7FFFFFFF:
            raise EncodeError(f"String of {len(encoded)} bytes exceeds the 4-byte length prefix")
        self.write_i32(len(encoded))
        self.write_bytes(encoded)

    @property
    def bytes_written(self) -> int:
        """Number of bytes written so far."""
        return self._written

    def getvalue(self) -> bytes:
        """Return the collected bytes of an in-memory sink.

        Raises:
            ValueError: If the sink writes through to a stream
        """
        if self._stream is not None:
            raise ValueError("getvalue() is only available on in-memory sinks")
        return bytes(self._buffer)


class ByteSource:
    """Reads primitive values from big-endian bytes.

    Example:
        >>> source = ByteSource(b"\\x00\\x07")
        >>> source.read_i16()
        7
    """

    def __init__(self, data: Union[BytesLike, BinaryIO]) -> None:
        """Initialize a source.

        Args:
            data: In-memory buffer, or a binary file object opened for reading
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._buffer: Optional[bytes] = bytes(data)
            self._stream: Optional[BinaryIO] = None
        else:
            self._buffer = None
            self._stream = data
        self._position = 0

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read exactly num_bytes bytes.

        Raises:
            DecodeError: If fewer bytes are available
        """
        if num_bytes < 0:
            raise DecodeError(f"Negative read size: {num_bytes}")

        if self._buffer is not None:
            end = self._position + num_bytes
            if end > len(self._buffer):
                raise DecodeError(
                    f"Truncated data: need {num_bytes} bytes at offset {self._position}, "
                    f"have {len(self._buffer) - self._position}"
                )
            chunk = self._buffer[self._position : end]
            self._position = end
            return chunk

        result = bytearray()
        while len(result) < num_bytes:
            chunk = self._read_stream(min(num_bytes - len(result), _CHUNK_SIZE))
            if not chunk:
                raise DecodeError(
                    f"Truncated data: need {num_bytes} bytes at offset {self._position}, "
                    f"stream ended after {len(result)}"
                )
            result.extend(chunk)
        self._position += num_bytes
        return bytes(result)

    def skip_bytes(self, num_bytes: int) -> None:
        """Consume num_bytes bytes without keeping them."""
        if num_bytes < 0:
            raise DecodeError(f"Negative skip size: {num_bytes}")

        if self._buffer is not None:
            if self._position + num_bytes > len(self._buffer):
                raise DecodeError(
                    f"Truncated data: cannot skip {num_bytes} bytes at offset {self._position}"
                )
            self._position += num_bytes
            return

        remaining = num_bytes
        while remaining:
            chunk = self._read_stream(min(remaining, _CHUNK_SIZE))
            if not chunk:
                raise DecodeError(
                    f"Truncated data: cannot skip {num_bytes} bytes at offset {self._position}"
                )
            remaining -= len(chunk)
            self._position += len(chunk)

    def read_byte(self) -> int:
        """Read a single unsigned byte."""
        return self.read_bytes(1)[0]

    def read_bool(self) -> bool:
        return self.read_byte() != 0

    def read_i8(self) -> int:
        return _I8.unpack(self.read_bytes(1))[0]

    def read_i16(self) -> int:
        return _I16.unpack(self.read_bytes(2))[0]

    def read_i32(self) -> int:
        return _I32.unpack(self.read_bytes(4))[0]

    def read_i64(self) -> int:
        return _I64.unpack(self.read_bytes(8))[0]

    def read_double(self) -> float:
        return _DOUBLE.unpack(self.read_bytes(8))[0]

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string."""
        length = self.read_i32()
        if length < 0:
            raise DecodeError(f"Negative string length: {length}")
        raw = self.read_bytes(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 in string value: {e}") from e

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._position

    def remaining(self) -> Optional[int]:
        """Bytes left in an in-memory buffer, or None for streams."""
        if self._buffer is None:
            return None
        return len(self._buffer) - self._position

    def _read_stream(self, size: int) -> bytes:
        assert self._stream is not None
        chunk = self._stream.read(size)
        return chunk if chunk is not None else b""


def _pack(codec: struct.Struct, value: int | float) -> bytes:
    try:
        return codec.pack(value)
    except struct.error as e:
        raise EncodeError(f"Cannot pack {value!r} as '{codec.format}': {e}") from e
