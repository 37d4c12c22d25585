import os
import struct

from const import *
from errors import MalformedContainer
from log import logger
from util import MemoryStream
from wwise_hierarchy import WwiseHierarchy


class BankChunk:

    def __init__(self, tag: str, offset: int, data: bytes):
        self.tag = tag
        # Offset of the chunk header inside the file
        self.offset = offset
        self.data = data

    def __len__(self):
        return len(self.data)


class BankParser:
    """
    Splits a bank file into its tagged chunks: tag (4 ASCII bytes), size u32,
    then size bytes of payload, repeated until the end of the file.
    """

    def __init__(self):
        self.chunks: list[BankChunk] = []

    def load(self, bank_data: bytes | bytearray):
        self.chunks.clear()
        reader = MemoryStream(bank_data)
        while not reader.is_eof():
            offset = reader.tell()
            if reader.remaining() < 8:
                raise MalformedContainer(
                    offset, f"truncated chunk header ({reader.remaining()} bytes)"
                )
            tag = reader.read(4).decode("ascii", errors="replace")
            size = reader.uint32_read()
            if size > reader.remaining():
                raise MalformedContainer(
                    offset,
                    f"chunk {tag} declares {size} bytes, "
                    f"{reader.remaining()} bytes left in file"
                )
            self.chunks.append(BankChunk(tag, offset, reader.read(size)))
            if tag not in KNOWN_CHUNK_TAGS:
                logger.debug(f"Unknown chunk tag {tag!r} at offset {offset}")

    def get_chunk(self, chunk_tag: str) -> bytes | None:
        for chunk in self.chunks:
            if chunk.tag == chunk_tag:
                return chunk.data
        return None

    def get_tags(self) -> list[str]:
        return [chunk.tag for chunk in self.chunks]


class BankHeader:
    """
    dwBankGeneratorVersion u32
    dwSoundBankID tid
    (remaining header fields are kept as is)
    """

    def __init__(self):
        self.version: int = 0
        self.bank_id: int = 0
        self.misc: bytes = b""

    @staticmethod
    def from_bytes(data: bytes | bytearray):
        stream = MemoryStream(data)
        header = BankHeader()
        header.version = stream.uint32_read()
        header.bank_id = stream.uint32_read()
        header.misc = stream.read()
        return header

    def get_revision(self) -> str:
        return revision_for_bank_version(self.version)


class StringTable:
    """
    uiType u32
    uiSize u32
    entries: name length U8x, bankID tid, name (no terminator)
    """

    def __init__(self):
        self.reserved: int = 0
        self.entries: dict[int, str] = {}

    @staticmethod
    def from_bytes(data: bytes | bytearray):
        stream = MemoryStream(data)
        table = StringTable()
        table.reserved = stream.uint32_read()
        for _ in range(stream.uint32_read()):
            length = stream.uint8_read()
            entry_id = stream.uint32_read()
            table.entries[entry_id] = stream.read(length).decode(
                "utf-8", errors="replace"
            )
        return table

    def __len__(self):
        return len(self.entries)

    def get_name(self, entry_id: int) -> str | None:
        return self.entries.get(entry_id)


class DidxEntry:

    def __init__(self):
        self.id = self.offset = self.size = 0

    @classmethod
    def from_bytes(cls, data: bytes | bytearray):
        e = DidxEntry()
        e.id, e.offset, e.size = struct.unpack("<III", data)
        return e


class MediaIndex:
    """
    DIDX lists (id, offset, size) for every embedded media file. Offsets are
    relative to the DATA payload.
    """

    def __init__(self):
        self.entries: dict[int, DidxEntry] = {}
        self.data: bytes = b""

    def load(self, didx_chunk: bytes | bytearray, data_chunk: bytes | bytearray = b""):
        self.entries.clear()
        if len(didx_chunk) % 12 != 0:
            logger.warning(
                f"DIDX size {len(didx_chunk)} is not a multiple of 12, "
                "ignoring the trailing bytes"
            )
        for n in range(len(didx_chunk) // 12):
            entry = DidxEntry.from_bytes(didx_chunk[12 * n:12 * (n + 1)])
            self.entries[entry.id] = entry
        self.data = bytes(data_chunk)

    def __len__(self):
        return len(self.entries)

    def get_media(self, media_id: int) -> bytes:
        entry = self.entries[media_id]
        if entry.offset + entry.size > len(self.data):
            raise MalformedContainer(
                entry.offset, f"media {media_id} runs past the DATA chunk"
            )
        return self.data[entry.offset:entry.offset + entry.size]


class StateTransition:

    def __init__(self, from_id: int = 0, to_id: int = 0, time: int = 0):
        self.from_id = from_id
        self.to_id = to_id
        self.time = time


class StmgStateGroup:

    def __init__(self):
        self.group_id: int = 0
        self.default_transition_time: int = 0
        self.transitions: list[StateTransition] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        g = StmgStateGroup()
        g.group_id = stream.uint32_read()
        g.default_transition_time = stream.uint32_read()
        g.transitions = [
            StateTransition(
                stream.uint32_read(), stream.uint32_read(), stream.uint32_read()
            )
            for _ in range(stream.uint32_read())
        ]
        return g


class SwitchPoint:

    def __init__(self, x: float = 0.0, switch_id: int = 0, shape: int = 0):
        self.x = x
        self.switch_id = switch_id
        self.shape = shape


class StmgSwitchGroup:
    """
    Switch group driven by a game parameter.
    """

    def __init__(self):
        self.group_id: int = 0
        self.game_parameter_id: int = 0
        self.unknown: int = 0
        self.points: list[SwitchPoint] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        g = StmgSwitchGroup()
        g.group_id = stream.uint32_read()
        g.game_parameter_id = stream.uint32_read()
        g.unknown = stream.uint8_read()
        g.points = [
            SwitchPoint(
                stream.float_read(), stream.uint32_read(), stream.uint32_read()
            )
            for _ in range(stream.uint32_read())
        ]
        return g


class GameParameter:

    def __init__(self):
        self.parameter_id: int = 0
        self.default: float = 0.0
        self.interpolation: int = 0
        self.attack: float = 0.0
        self.release: float = 0.0
        self.bound_to: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        p = GameParameter()
        p.parameter_id = stream.uint32_read()
        p.default = stream.float_read()
        p.interpolation = stream.uint32_read()
        p.attack = stream.float_read()
        p.release = stream.float_read()
        p.bound_to = stream.uint8_read()
        return p


class StateManager:
    """
    STMG chunk: global voice settings, state groups, parameter driven switch
    groups and game parameters.
    """

    def __init__(self):
        self.volume_threshold: float = 0.0
        self.max_voices: int = 0
        self.state_groups: list[StmgStateGroup] = []
        self.switch_groups: list[StmgSwitchGroup] = []
        self.game_parameters: list[GameParameter] = []

    @staticmethod
    def from_bytes(data: bytes | bytearray):
        stream = MemoryStream(data)
        s = StateManager()
        s.volume_threshold = stream.float_read()
        s.max_voices = stream.uint16_read()
        s.state_groups = stream.array_read(
            stream.uint32_read(), StmgStateGroup.from_memory_stream
        )
        s.switch_groups = stream.array_read(
            stream.uint32_read(), StmgSwitchGroup.from_memory_stream
        )
        s.game_parameters = stream.array_read(
            stream.uint32_read(), GameParameter.from_memory_stream
        )
        if not stream.is_eof():
            logger.debug(f"{stream.remaining()} unread bytes at the end of STMG")
        return s


class SoundBank:

    def __init__(self):
        self.path: str = ""
        self.chunks: list[BankChunk] = []
        self.header: BankHeader | None = None
        self.revision: str = DEFAULT_REVISION
        self.strings = StringTable()
        self.media = MediaIndex()
        self.state_manager: StateManager | None = None
        self.hierarchy: WwiseHierarchy | None = None

    @staticmethod
    def from_file(
        path: str,
        revision: str = REV_AUTO,
        workers: int = 0,
        strict: bool = False
    ) -> 'SoundBank':
        with open(path, "rb") as f:
            data = f.read()
        bank = SoundBank.from_bytes(data, revision, workers, strict)
        bank.path = path
        return bank

    @staticmethod
    def from_bytes(
        data: bytes | bytearray,
        revision: str = REV_AUTO,
        workers: int = 0,
        strict: bool = False
    ) -> 'SoundBank':
        parser = BankParser()
        parser.load(data)

        bank = SoundBank()
        bank.chunks = parser.chunks

        header = parser.get_chunk(BKHD)
        if header != None:
            bank.header = BankHeader.from_bytes(header)

        if revision == REV_AUTO:
            if bank.header == None:
                logger.warning(
                    f"No bank header, decoding as revision {DEFAULT_REVISION}"
                )
                revision = DEFAULT_REVISION
            else:
                revision = bank.header.get_revision()
                logger.info(
                    f"Bank version {bank.header.version:#x} resolves to "
                    f"revision {revision}"
                )
        elif revision not in REVISIONS:
            raise ValueError(f"Unknown format revision {revision!r}")
        bank.revision = revision

        # Broken optional chunks stay opaque in `chunks`
        strings = parser.get_chunk(STID)
        if strings != None:
            try:
                bank.strings = StringTable.from_bytes(strings)
            except MalformedContainer as e:
                logger.warning(f"Skipping string table: {e}")

        didx = parser.get_chunk(DIDX)
        if didx != None:
            bank.media.load(didx, parser.get_chunk(DATA) or b"")

        stmg = parser.get_chunk(STMG)
        if stmg != None:
            try:
                bank.state_manager = StateManager.from_bytes(stmg)
            except MalformedContainer as e:
                logger.warning(f"Skipping state manager settings: {e}")

        hirc = parser.get_chunk(HIRC)
        if hirc != None:
            bank.hierarchy = WwiseHierarchy()
            bank.hierarchy.load(hirc, revision, workers, strict)

        return bank

    def get_id(self) -> int:
        if self.header == None:
            return 0
        return self.header.bank_id

    def get_name(self) -> str:
        name = self.name_of(self.get_id())
        if name != None:
            return name
        if self.path:
            return os.path.splitext(os.path.basename(self.path))[0]
        return str(self.get_id())

    def name_of(self, entry_id: int) -> str | None:
        return self.strings.get_name(entry_id)

    def get_tags(self) -> list[str]:
        return [chunk.tag for chunk in self.chunks]
