from typing_extensions import Self

from const import hirc_type_name
from errors import UnknownObjectKind
from util import MemoryStream, assert_consumed


class HircEntry:
    """
    Must Have:
    hierarchy_type - U8
    size - U32
    hierarchy_id - tid

    The type byte and the size are read by the hierarchy loader. A decoder
    receives exactly `size` bytes, starting at the id.
    """

    hierarchy_type: int = 0

    def __init__(self):
        self.size: int = 0
        self.hierarchy_id: int = 0
        self.revision: str = ""
        # Offset of the object record (type byte) inside the HIRC payload
        self.offset: int = 0

    @classmethod
    def from_bytes(
        cls, data: bytes | bytearray, revision: str, offset: int = 0
    ) -> Self:
        stream = MemoryStream(data, offset + 5)

        entry = cls()
        entry.size = len(data)
        entry.revision = revision
        entry.offset = offset

        head = stream.tell()

        entry.hierarchy_id = stream.uint32_read()
        entry.read_fields(stream, revision)

        tail = stream.tell()

        assert_consumed(
            f"Header size and read data size mismatch for {cls.__name__} "
            f"{entry.hierarchy_id}",
            entry.size, tail - head
        )

        return entry

    def read_fields(self, stream: MemoryStream, revision: str):
        raise NotImplementedError

    def get_id(self):
        return self.hierarchy_id

    def get_type_name(self):
        return hirc_type_name(self.hierarchy_type)

    def get_parent_id(self) -> int | None:
        return None

    def get_children(self) -> list[int]:
        return []

    def is_fallback(self):
        return False


class UnknownEntry(HircEntry):
    """
    Opaque storage for objects without a decoder, or whose decoder failed.
    """

    def __init__(self):
        super().__init__()
        self.kind: int = 0
        self.hierarchy_id: int | None = None
        self.blob: bytes = b""
        self.error: Exception | None = None

    @property
    def hierarchy_type(self):
        return self.kind

    @staticmethod
    def fallback(
        kind: int,
        data: bytes | bytearray,
        revision: str,
        offset: int = 0,
        error: Exception | None = None
    ) -> 'UnknownEntry':
        entry = UnknownEntry()
        entry.kind = kind
        entry.size = len(data)
        entry.revision = revision
        entry.offset = offset
        entry.error = error
        if len(data) >= 4:
            entry.hierarchy_id = int.from_bytes(data[:4], byteorder="little")
            entry.blob = bytes(data[4:])
        else:
            entry.blob = bytes(data)
        return entry

    def is_fallback(self):
        return True


class HircDiagnostic:
    """
    Why an object ended up as an UnknownEntry. Offsets are relative to the
    HIRC payload.
    """

    def __init__(
        self,
        kind: int,
        hierarchy_id: int | None,
        offset: int,
        size: int,
        error: Exception
    ):
        self.kind = kind
        self.hierarchy_id = hierarchy_id
        self.offset = offset
        self.size = size
        self.error = error

    @property
    def reason(self) -> str:
        if isinstance(self.error, UnknownObjectKind):
            return "unknown kind"
        return type(self.error).__name__

    def __str__(self):
        hierarchy_id = "?" if self.hierarchy_id == None else self.hierarchy_id
        return (
            f"{hirc_type_name(self.kind)} {hierarchy_id} at offset "
            f"{self.offset} ({self.size} bytes): {self.error}"
        )
