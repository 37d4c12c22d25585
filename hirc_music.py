"""
Interactive music hierarchy objects.

Segments, switch containers and playlist containers share a prefix: MIDI
behavior (absent in 2013), AudioProperties, children, grid timing and
stingers. Switch and playlist containers continue with the transition rules.
"""

from audio_properties import *
from const import *
from hirc_objects import AudioObject, GraphPoint
from log import logger
from path_tree import PathTree
from playlist import PlaylistItem
from util import MemoryStream


def read_midi_behavior(stream: MemoryStream, revision: str) -> int | None:
    if revision == REV_2013:
        return None
    return stream.uint8_read()


class MusicGrid:
    """
    fGridPeriod f64
    fGridOffset f64
    fTempo f32
    uNumBeatsPerBar U8x
    uBeatValue U8x
    Unknown U8x
    """

    def __init__(self):
        self.period: float = 0.0
        self.offset: float = 0.0
        self.tempo: float = 0.0
        self.signature_upper: int = 0
        self.signature_lower: int = 0
        self.unknown: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        g = MusicGrid()
        g.period = stream.double_read()
        g.offset = stream.double_read()
        g.tempo = stream.float_read()
        g.signature_upper = stream.uint8_read()
        g.signature_lower = stream.uint8_read()
        g.unknown = stream.uint8_read()
        return g


class MusicStinger:
    """
    TriggerID tid
    SegmentID tid
    SyncPlayAt u32
    uCueFilterHash tid
    DontRepeatTime u32
    numSegmentLookAhead u32 or U8x
    """

    def __init__(self):
        self.trigger_id: int = 0
        self.segment_id: int = 0
        self.play_at: int = 0
        self.cue_id: int = 0
        self.do_not_repeat_in: int = 0
        self.allow_next_segment: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream, narrow_lookahead: bool = False):
        s = MusicStinger()
        s.trigger_id = stream.uint32_read()
        s.segment_id = stream.uint32_read()
        s.play_at = stream.uint32_read()
        s.cue_id = stream.uint32_read()
        s.do_not_repeat_in = stream.uint32_read()
        if narrow_lookahead:
            s.allow_next_segment = stream.uint8_read()
        else:
            s.allow_next_segment = stream.uint32_read()
        return s


def read_stingers(
    stream: MemoryStream, narrow_lookahead: bool = False
) -> list[MusicStinger]:
    return [
        MusicStinger.from_memory_stream(stream, narrow_lookahead)
        for _ in range(stream.uint32_read())
    ]


class MusicFade:
    """
    transitionTime u32
    eFadeCurve u32
    iFadeOffset s32
    """

    def __init__(self, duration: int = 0, curve: int = 0, offset: int = 0):
        self.duration = duration
        self.curve = curve
        self.offset = offset

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        return MusicFade(
            stream.uint32_read(), stream.uint32_read(), stream.int32_read()
        )


class MusicTransitionSegment:

    def __init__(self):
        self.segment_id: int = 0
        self.fade_in = MusicFade()
        self.fade_out = MusicFade()
        self.play_pre_entry: int = 0
        self.play_post_exit: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        t = MusicTransitionSegment()
        t.segment_id = stream.uint32_read()
        t.fade_in = MusicFade.from_memory_stream(stream)
        t.fade_out = MusicFade.from_memory_stream(stream)
        t.play_pre_entry = stream.uint8_read()
        t.play_post_exit = stream.uint8_read()
        return t


class MusicTransition:
    """
    srcID[] (count u32)
    dstID[] (count u32)
    source fade, eSyncType u32, uCueFilterHash tid, bPlayPostExit U8x
    destination fade, uCueFilterHash tid, uJumpToID tid
    eEntryType u16 (2013, 2016) / u32 (2019+)
    bPlayPreEntry U8x
    bDestMatchSourceCueName U8x
    bIsTransObjectEnabled U8x
    (transition segment, only when enabled)
    """

    def __init__(self):
        self.source_ids: list[int] = []
        self.destination_ids: list[int] = []
        self.fade_out = MusicFade()
        self.exit_source_at: int = 0
        self.exit_source_at_cue_id: int = 0
        self.play_post_exit: int = 0
        self.fade_in = MusicFade()
        self.custom_cue_filter_id: int = 0
        self.jump_to_playlist_item_id: int = 0
        self.destination_sync_to: int = 0
        self.play_pre_entry: int = 0
        self.match_source_cue_name: bool = False
        self.use_transition_segment: bool = False
        self.transition_segment: MusicTransitionSegment | None = None

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        t = MusicTransition()
        t.source_ids = stream.uint32_array(stream.uint32_read())
        t.destination_ids = stream.uint32_array(stream.uint32_read())

        t.fade_out = MusicFade.from_memory_stream(stream)
        t.exit_source_at = stream.uint32_read()
        t.exit_source_at_cue_id = stream.uint32_read()
        t.play_post_exit = stream.uint8_read()

        t.fade_in = MusicFade.from_memory_stream(stream)
        t.custom_cue_filter_id = stream.uint32_read()
        t.jump_to_playlist_item_id = stream.uint32_read()
        if revision in (REV_2013, REV_2016):
            t.destination_sync_to = stream.uint16_read()
        else:
            t.destination_sync_to = stream.uint32_read()
        t.play_pre_entry = stream.uint8_read()
        t.match_source_cue_name = stream.bool_read()

        t.use_transition_segment = stream.bool_read()
        if t.use_transition_segment:
            t.transition_segment = MusicTransitionSegment.from_memory_stream(stream)

        return t


def read_transitions(stream: MemoryStream, revision: str) -> list[MusicTransition]:
    return [
        MusicTransition.from_memory_stream(stream, revision)
        for _ in range(stream.uint32_read())
    ]


class MusicCue:

    def __init__(self, cue_id: int = 0, time: float = 0.0, name: str = ""):
        self.cue_id = cue_id
        self.time = time
        self.name = name

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        cue_id = stream.uint32_read()
        time = stream.double_read()
        if revision in (REV_2013, REV_2016):
            # Length includes the terminator
            length = stream.uint32_read()
            name = ""
            if length > 0:
                name = stream.read(length - 1).decode("utf-8", errors="replace")
                stream.advance(1)
        else:
            name = stream.cstring_read()
        return MusicCue(cue_id, time, name)


class MusicNode(AudioObject):
    """
    Prefix shared by segments, switch containers and playlist containers.
    """

    # Stingers of this kind store their look-ahead field as one byte in
    # these revisions
    narrow_stinger_revisions: tuple[str, ...] = ()

    def __init__(self):
        super().__init__()
        self.midi_behavior: int | None = None
        self.children: list[int] = []
        self.grid = MusicGrid()
        self.stingers: list[MusicStinger] = []

    def read_prefix(self, stream: MemoryStream, revision: str):
        self.midi_behavior = read_midi_behavior(stream, revision)
        self.properties = AudioProperties.from_memory_stream(stream, revision)

        # [Children]
        self.children = stream.uint32_array(stream.uint32_read())

        self.grid = MusicGrid.from_memory_stream(stream)
        self.stingers = read_stingers(
            stream, revision in self.narrow_stinger_revisions
        )

    def get_children(self):
        return self.children


class MusicSegment(MusicNode):
    """
    (prefix)
    fDuration f64
    pArrayMarkers (count u32): id tid, fPosition f64, name
    """

    hierarchy_type = MUSIC_SEGMENT

    def __init__(self):
        super().__init__()
        self.end_trim_offset: float = 0.0
        self.cues: list[MusicCue] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        self.read_prefix(stream, revision)
        self.end_trim_offset = stream.double_read()
        self.cues = [
            MusicCue.from_memory_stream(stream, revision)
            for _ in range(stream.uint32_read())
        ]


class MusicSwitchContainer(MusicNode):
    """
    (prefix)
    transition rules
    bIsContinuePlayback U8x
    uTreeDepth u32, then group ids and group types
    uTreeDataSize u32
    bIsWeighted U8x
    decision tree
    """

    hierarchy_type = MUSIC_SWITCH_CONTAINER

    def __init__(self):
        super().__init__()
        self.transitions: list[MusicTransition] = []
        self.continue_on_switch_change: bool = False
        self.group_ids: list[int] = []
        self.group_types: list[bool] = []
        self.use_weighted: bool = False
        self.paths = PathTree()

    def read_fields(self, stream: MemoryStream, revision: str):
        self.read_prefix(stream, revision)
        self.transitions = read_transitions(stream, revision)

        self.continue_on_switch_change = stream.bool_read()

        count = stream.uint32_read()
        self.group_ids = stream.uint32_array(count)
        self.group_types = [stream.bool_read() for _ in range(count)]

        path_length = stream.uint32_read()
        self.use_weighted = stream.bool_read()
        self.paths = PathTree.from_memory_stream(stream, path_length, self.children)


class MusicPlaylistContainer(MusicNode):
    """
    (prefix)
    transition rules
    numPlaylistItems u32
    playlist tree
    """

    hierarchy_type = MUSIC_PLAYLIST_CONTAINER
    narrow_stinger_revisions = (REV_2013, REV_2016, REV_2019)

    def __init__(self):
        super().__init__()
        self.transitions: list[MusicTransition] = []
        self.playlist_element_count: int = 0
        self.playlist: PlaylistItem | None = None

    def read_fields(self, stream: MemoryStream, revision: str):
        self.read_prefix(stream, revision)
        self.transitions = read_transitions(stream, revision)

        self.playlist_element_count = stream.uint32_read()
        if self.playlist_element_count > 0:
            self.playlist = PlaylistItem.from_memory_stream(stream, revision)
            if self.playlist.count() != self.playlist_element_count:
                logger.debug(
                    f"Playlist of {self.hierarchy_id} declares "
                    f"{self.playlist_element_count} items, tree holds "
                    f"{self.playlist.count()}"
                )


class MusicTrackSource:
    """
    Same shape as a Sound source. The 2013 layout widens the source type to
    u32 and carries extra location fields.
    """

    def __init__(self):
        self.unknown_04: int = 0
        self.unknown_05: int = 0
        self.conversion: int = 0
        self.unknown_07: int = 0
        self.source: int = 0
        self.audio_id: int = 0
        self.file_id: int | None = None
        self.in_memory_offset: int | None = None
        self.in_memory_size: int | None = None
        self.audio_length: int = 0
        self.audio_type: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        s = MusicTrackSource()
        s.unknown_04 = stream.uint8_read()
        s.unknown_05 = stream.uint8_read()
        s.conversion = stream.uint8_read()
        s.unknown_07 = stream.uint8_read()
        if revision == REV_2013:
            raw_source = stream.uint32_read()
            if raw_source not in SOURCE_TYPES_2013:
                raise ValueError(f"Unexpected music track source type {raw_source}")
            s.source = SOURCE_TYPES_2013[raw_source]
            s.audio_id = stream.uint32_read()
            s.file_id = stream.uint32_read()
            if s.source == SOURCE_EMBEDDED:
                s.in_memory_offset = stream.uint32_read()
                s.in_memory_size = stream.uint32_read()
        else:
            s.source = stream.uint8_read()
            s.audio_id = stream.uint32_read()
        s.audio_length = stream.uint32_read()
        s.audio_type = stream.uint8_read()
        return s


class MusicTimeParameter:
    """
    trackID u32
    sourceID tid
    eventID tid (2019+)
    fPlayAt f64
    fBeginTrimOffset f64
    fEndTrimOffset f64
    fSrcDuration f64
    """

    def __init__(self):
        self.sub_track_index: int = 0
        self.audio_id: int = 0
        self.event_id: int | None = None
        self.begin_offset: float = 0.0
        self.begin_trim_offset: float = 0.0
        self.end_trim_offset: float = 0.0
        self.end_offset: float = 0.0

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        t = MusicTimeParameter()
        t.sub_track_index = stream.uint32_read()
        t.audio_id = stream.uint32_read()
        if is_revision_at_least(revision, REV_2019):
            t.event_id = stream.uint32_read()
        t.begin_offset = stream.double_read()
        t.begin_trim_offset = stream.double_read()
        t.end_trim_offset = stream.double_read()
        t.end_offset = stream.double_read()
        return t


class MusicFadeCurve:

    def __init__(self):
        self.time_parameter_index: int = 0
        self.curve_type: int = 0
        self.points: list[GraphPoint] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        c = MusicFadeCurve()
        c.time_parameter_index = stream.uint32_read()
        c.curve_type = stream.uint32_read()
        c.points = stream.array_read(
            stream.uint32_read(), GraphPoint.from_memory_stream
        )
        return c


class MusicTrackSwitchParameters:

    def __init__(self):
        self.unknown: int = 0
        self.group_id: int = 0
        self.default_switch_id: int = 0
        self.switch_ids: list[int] = []
        self.fade_out = MusicFade()
        self.exit_source_at: int = 0
        self.exit_source_at_cue_id: int = 0
        self.fade_in = MusicFade()

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        p = MusicTrackSwitchParameters()
        p.unknown = stream.uint8_read()
        p.group_id = stream.uint32_read()
        p.default_switch_id = stream.uint32_read()
        p.switch_ids = stream.uint32_array(stream.uint32_read())
        p.fade_out = MusicFade.from_memory_stream(stream)
        p.exit_source_at = stream.uint32_read()
        p.exit_source_at_cue_id = stream.uint32_read()
        p.fade_in = MusicFade.from_memory_stream(stream)
        return p


class MusicTrack(AudioObject):
    """
    ulID tid
    MIDI behavior U8x (not 2013)
    sources (count u32)
    playlist time parameters (count u32)
    numSubTrack u32 / numCurves u32, presence depends on revision
    clip automation curves
    AudioProperties
    eTrackType u32 (2013) / U8x
    switch parameters, only for switch tracks
    iLookAheadTime u32
    """

    hierarchy_type = MUSIC_TRACK

    def __init__(self):
        super().__init__()
        self.midi_behavior: int | None = None
        self.sources: list[MusicTrackSource] = []
        self.time_parameters: list[MusicTimeParameter] = []
        self.sub_track_count: int = 0
        self.curves: list[MusicFadeCurve] = []
        self.track_type: int = MUSIC_TRACK_NORMAL
        self.switch_parameters: MusicTrackSwitchParameters | None = None
        self.look_ahead_time: int = 0

    def read_fields(self, stream: MemoryStream, revision: str):
        self.midi_behavior = read_midi_behavior(stream, revision)

        self.sources = [
            MusicTrackSource.from_memory_stream(stream, revision)
            for _ in range(stream.uint32_read())
        ]
        self.time_parameters = [
            MusicTimeParameter.from_memory_stream(stream, revision)
            for _ in range(stream.uint32_read())
        ]

        curve_count = 0
        if revision in (REV_2013, REV_2016):
            self.sub_track_count = stream.uint32_read()
            # Tracks without sources have no curve count
            if len(self.sources) > 0:
                curve_count = stream.uint32_read()
        else:
            if len(self.time_parameters) > 0:
                self.sub_track_count = stream.uint32_read()
            curve_count = stream.uint32_read()
        self.curves = stream.array_read(curve_count, MusicFadeCurve.from_memory_stream)

        self.properties = AudioProperties.from_memory_stream(stream, revision)

        if revision == REV_2013:
            self.track_type = stream.uint32_read()
        else:
            self.track_type = stream.uint8_read()
        if self.track_type == MUSIC_TRACK_SWITCH:
            self.switch_parameters = MusicTrackSwitchParameters.from_memory_stream(stream)

        self.look_ahead_time = stream.uint32_read()

    def get_audio_ids(self) -> list[int]:
        return [s.audio_id for s in self.sources]
