import struct

from collections.abc import Callable
from typing import Any, TypeVar

from errors import LengthMismatch, MalformedContainer

T = TypeVar("T")


class MemoryStream:
    '''
    Forward little-endian reader over an in-memory buffer.

    Modified from https://github.com/kboykboy2/io_scene_helldivers2 with permission from kboykboy
    '''

    def __init__(self, data: bytes | bytearray | memoryview = b"", base: int = 0):
        self.location = 0
        self.data = bytes(data)
        # Offset of this buffer inside its parent, only used in error messages
        self.base = base
        self.endian = "<"

    def __len__(self):
        return len(self.data)

    def seek(self, location: int):
        if location < 0 or location > len(self.data):
            raise MalformedContainer(
                self.base + location, "seeking outside of stream"
            )
        self.location = location

    def tell(self) -> int:
        return self.location

    def remaining(self) -> int:
        return len(self.data) - self.location

    def is_eof(self) -> bool:
        return self.location >= len(self.data)

    def read(self, length: int = -1) -> bytes:
        if length == -1:
            length = len(self.data) - self.location
        if length < 0 or self.location + length > len(self.data):
            raise MalformedContainer(
                self.base + self.location,
                f"reading {length} bytes past end of stream "
                f"({self.remaining()} bytes left)"
            )
        new_data = self.data[self.location:self.location + length]
        self.location += length
        return new_data

    def advance(self, offset: int):
        self.seek(self.location + offset)

    def read_format(self, format: str, size: int):
        format = self.endian + format
        return struct.unpack(format, self.read(size))[0]

    def int8_read(self) -> int:
        return self.read_format('b', 1)

    def uint8_read(self) -> int:
        return self.read_format('B', 1)

    def bool_read(self) -> bool:
        return self.uint8_read() != 0

    def int16_read(self) -> int:
        return self.read_format('h', 2)

    def uint16_read(self) -> int:
        return self.read_format('H', 2)

    def int32_read(self) -> int:
        return self.read_format('i', 4)

    def uint32_read(self) -> int:
        return self.read_format('I', 4)

    def int64_read(self) -> int:
        return self.read_format('q', 8)

    def uint64_read(self) -> int:
        return self.read_format('Q', 8)

    def float_read(self) -> float:
        return self.read_format('f', 4)

    def double_read(self) -> float:
        return self.read_format('d', 8)

    def cstring_read(self) -> str:
        end = self.data.find(b"\x00", self.location)
        if end == -1:
            raise MalformedContainer(
                self.base + self.location, "unterminated string"
            )
        value = self.data[self.location:end].decode("utf-8", errors="replace")
        self.location = end + 1
        return value

    def uint32_array(self, count: int) -> list[int]:
        return [self.uint32_read() for _ in range(count)]

    def array_read(self, count: int, reader: Callable[['MemoryStream'], T]) -> list[T]:
        return [reader(self) for _ in range(count)]

    def parallel_read(
        self,
        count: int,
        tag_reader: Callable[['MemoryStream'], int],
        value_reader: Callable[['MemoryStream', int], Any]
    ) -> tuple[list[int], list[Any]]:
        """
        Read `count` tags followed by `count` values. The value reader is given
        the tag that shares its position.
        """
        tags = [tag_reader(self) for _ in range(count)]
        values = [value_reader(self, tag) for tag in tags]
        return tags, values


def read_u8(s: MemoryStream) -> int:
    return s.uint8_read()


def bits(*flags: bool) -> int:
    """
    Fold a sequence of booleans into a bitmask, first flag in bit 0.
    """
    value = 0
    for i, flag in enumerate(flags):
        if flag:
            value |= 1 << i
    return value


def assert_consumed(msg: str, expect: int, receive: int):
    if expect != receive:
        raise LengthMismatch(msg, expect, receive)
