"""
HIRC chunk loader.

Framing (kind U8x, size u32, size bytes) is sequential. Once every object
blob is sliced out, blobs are decoded independently, optionally on a thread
pool, and collected back in their original order.
"""

import struct

from concurrent.futures import ThreadPoolExecutor

from const import *
from errors import (
    BankReaderError, MalformedContainer, UnknownObjectKind, UnsupportedRevision
)
from hirc_entry import HircDiagnostic, HircEntry, UnknownEntry
from hirc_events import DialogueEvent, Event, EventAction
from hirc_music import (
    MusicPlaylistContainer, MusicSegment, MusicSwitchContainer, MusicTrack
)
from hirc_objects import (
    ActorMixer, AudioBus, AuxiliaryBus, BlendContainer, Container, Settings,
    Sound, SwitchContainer
)
from log import logger
from util import MemoryStream


# kind -> (decoder, revisions it understands)
HIRC_DECODERS: dict[int, tuple[type[HircEntry], tuple[str, ...]]] = {
    SETTINGS: (Settings, (REV_2016,)),
    SOUND: (Sound, (REV_2016,)),
    EVENT_ACTION: (EventAction, REVISIONS),
    EVENT: (Event, REVISIONS),
    CONTAINER: (Container, (REV_2016,)),
    SWITCH_CONTAINER: (SwitchContainer, (REV_2016,)),
    ACTOR_MIXER: (ActorMixer, (REV_2016,)),
    AUDIO_BUS: (AudioBus, (REV_2016,)),
    BLEND_CONTAINER: (BlendContainer, (REV_2016,)),
    MUSIC_SEGMENT: (MusicSegment, REVISIONS),
    MUSIC_TRACK: (MusicTrack, REVISIONS),
    MUSIC_SWITCH_CONTAINER: (MusicSwitchContainer, REVISIONS),
    MUSIC_PLAYLIST_CONTAINER: (MusicPlaylistContainer, REVISIONS),
    DIALOGUE_EVENT: (DialogueEvent, (REV_2016,)),
    AUXILIARY_BUS: (AuxiliaryBus, (REV_2016,)),
}


class HircRecord:
    """
    One framed object: its kind, where its record starts in the HIRC payload
    and the blob of `size` bytes that follows the record header.
    """

    def __init__(self, kind: int, offset: int, data: bytes):
        self.kind = kind
        self.offset = offset
        self.data = data


def frame_records(hierarchy_data: bytes | bytearray) -> list[HircRecord]:
    """
    Slice the HIRC payload into object records. Any record running past the
    end of the payload raises MalformedContainer.
    """
    reader = MemoryStream(hierarchy_data)
    num_items = reader.uint32_read()

    records: list[HircRecord] = []
    for i in range(num_items):
        offset = reader.tell()
        if reader.remaining() < 5:
            raise MalformedContainer(
                offset,
                f"HIRC declares {num_items} objects, payload ends after {i}"
            )
        kind = reader.uint8_read()
        size = reader.uint32_read()
        if size > reader.remaining():
            raise MalformedContainer(
                offset,
                f"{hirc_type_name(kind)} object declares {size} bytes, "
                f"{reader.remaining()} bytes left in HIRC"
            )
        records.append(HircRecord(kind, offset, reader.read(size)))

    if not reader.is_eof():
        logger.debug(f"{reader.remaining()} trailing bytes after HIRC objects")

    return records


class HircEntryFactory:

    @classmethod
    def decoder_for(cls, kind: int, revision: str) -> type[HircEntry]:
        try:
            decoder, revisions = HIRC_DECODERS[kind]
        except KeyError:
            raise UnknownObjectKind(kind)
        if revision not in revisions:
            raise UnsupportedRevision(kind, revision)
        return decoder

    @classmethod
    def from_bytes(
        cls, kind: int, data: bytes | bytearray, revision: str, offset: int = 0
    ) -> HircEntry:
        return cls.decoder_for(kind, revision).from_bytes(data, revision, offset)

    @classmethod
    def is_supported(cls, kind: int, revision: str) -> bool:
        return kind in HIRC_DECODERS and revision in HIRC_DECODERS[kind][1]


class WwiseHierarchy:

    def __init__(self):
        self.revision: str = DEFAULT_REVISION
        self.entries: list[HircEntry] = []
        self.id_lookup: dict[int, HircEntry] = {}
        self.type_lists: dict[int, list[HircEntry]] = {}
        self.diagnostics: list[HircDiagnostic] = []

    @staticmethod
    def from_bytes(
        hierarchy_data: bytes | bytearray,
        revision: str = DEFAULT_REVISION,
        workers: int = 0,
        strict: bool = False
    ) -> 'WwiseHierarchy':
        hierarchy = WwiseHierarchy()
        hierarchy.load(hierarchy_data, revision, workers, strict)
        return hierarchy

    def load(
        self,
        hierarchy_data: bytes | bytearray,
        revision: str = DEFAULT_REVISION,
        workers: int = 0,
        strict: bool = False,
        decode: bool = True
    ):
        """
        Decode a HIRC payload. `workers` > 0 decodes object blobs on a thread
        pool of that size. With `strict`, the first object that fails to
        decode raises instead of becoming an UnknownEntry. With `decode` off
        every object is kept opaque.
        """
        if revision not in REVISIONS:
            raise ValueError(f"Unknown format revision {revision!r}")

        self.revision = revision
        self.entries.clear()
        self.id_lookup.clear()
        self.type_lists.clear()
        self.diagnostics.clear()

        records = frame_records(hierarchy_data)

        def _decode(record: HircRecord):
            if not decode:
                return UnknownEntry.fallback(
                    record.kind, record.data, revision, record.offset
                ), None
            return self._decode_record(record, revision, strict)

        if workers > 0 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(_decode, records))
        else:
            results = [_decode(record) for record in records]

        for entry, diagnostic in results:
            self._add_entry(entry)
            if diagnostic != None:
                self.diagnostics.append(diagnostic)

        logger.info(
            f"HIRC ({revision}): {len(self.entries)} objects, "
            f"{self.decoded_count()} decoded, {self.fallback_count()} kept opaque"
        )

    @staticmethod
    def _decode_record(
        record: HircRecord, revision: str, strict: bool
    ) -> tuple[HircEntry, HircDiagnostic | None]:
        try:
            return HircEntryFactory.from_bytes(
                record.kind, record.data, revision, record.offset
            ), None
        except UnknownObjectKind as e:
            logger.debug(
                f"No decoder for object kind {record.kind:#04x} at offset "
                f"{record.offset}. Keeping it opaque."
            )
            error: Exception = e
        except (BankReaderError, struct.error, ValueError, RecursionError) as e:
            if strict:
                raise
            error = e

        entry = UnknownEntry.fallback(
            record.kind, record.data, revision, record.offset, error
        )
        diagnostic = HircDiagnostic(
            record.kind, entry.hierarchy_id, record.offset, len(record.data), error
        )
        if not isinstance(error, UnknownObjectKind):
            logger.warning(f"Falling back to opaque storage: {diagnostic}")
        return entry, diagnostic

    def _add_entry(self, entry: HircEntry):
        self.entries.append(entry)
        if entry.hierarchy_id != None:
            if entry.hierarchy_id in self.id_lookup:
                logger.debug(
                    f"Duplicate object id {entry.hierarchy_id}, keeping the "
                    "first one for lookups"
                )
            else:
                self.id_lookup[entry.hierarchy_id] = entry
        try:
            self.type_lists[entry.hierarchy_type].append(entry)
        except KeyError:
            self.type_lists[entry.hierarchy_type] = [entry]

    def __len__(self):
        return len(self.entries)

    def has_entry(self, entry_id: int) -> bool:
        return entry_id in self.id_lookup

    def get_entry(self, entry_id: int) -> HircEntry:
        return self.id_lookup[entry_id]

    def get_entries(self) -> list[HircEntry]:
        return self.entries

    def get_type(self, hirc_type: int) -> list[HircEntry]:
        try:
            return self.type_lists[hirc_type]
        except KeyError:
            return []

    def get_actor_mixers(self) -> list[ActorMixer]:
        return self.get_type(ACTOR_MIXER) # type: ignore

    def get_audio_buses(self) -> list[AudioBus]:
        return self.get_type(AUDIO_BUS) + self.get_type(AUXILIARY_BUS) # type: ignore

    def get_events(self) -> list[Event]:
        return self.get_type(EVENT) # type: ignore

    def get_event_actions(self) -> list[EventAction]:
        return self.get_type(EVENT_ACTION) # type: ignore

    def get_music_segments(self) -> list[MusicSegment]:
        return self.get_type(MUSIC_SEGMENT) # type: ignore

    def get_music_tracks(self) -> list[MusicTrack]:
        return self.get_type(MUSIC_TRACK) # type: ignore

    def get_fallbacks(self) -> list[UnknownEntry]:
        return [e for e in self.entries if e.is_fallback()] # type: ignore

    def decoded_count(self) -> int:
        return len(self.entries) - self.fallback_count()

    def fallback_count(self) -> int:
        return sum(1 for e in self.entries if e.is_fallback())

    def kind_counts(self) -> dict[int, int]:
        return {kind: len(entries) for kind, entries in sorted(self.type_lists.items())}
