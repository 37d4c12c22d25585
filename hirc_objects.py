"""
Actor-mixer and master-mixer hierarchy objects.
"""

from audio_properties import *
from const import *
from hirc_entry import HircEntry
from log import logger
from util import MemoryStream


class Settings(HircEntry):
    """
    ulID tid
    cProps U8x
    pID[cProps] U8x
    pValue[cProps]
    """

    hierarchy_type = SETTINGS

    def __init__(self):
        super().__init__()
        self.parameters = ParameterBag()

    def read_fields(self, stream: MemoryStream, revision: str):
        self.parameters = ParameterBag.from_memory_stream(stream, revision)


class AudioObject(HircEntry):
    """
    Objects that carry an AudioProperties block.
    """

    def __init__(self):
        super().__init__()
        self.properties = AudioProperties()

    def get_parent_id(self):
        return self.properties.parent_id

    def get_output_bus_id(self):
        return self.properties.output_bus_id


class Sound(AudioObject):
    """
    ulID tid
    Unknown_04 U8x
    Unknown_05 U8x
    if Unknown_04 > 1: 16 opaque bytes
    else:
        Conversion U8x
        Unknown_07 U8x
        Source U8x
        AudioId tid
        AudioLength u32
        AudioType U8x
    AudioProperties
    """

    hierarchy_type = SOUND

    def __init__(self):
        super().__init__()
        self.unknown_04: int = 0
        self.unknown_05: int = 0
        self.conversion: int = 0
        self.unknown_07: int = 0
        self.source: int = 0
        self.audio_id: int = 0
        self.audio_length: int = 0
        self.audio_type: int = 0
        self.opaque_source: bytes = b""

    def read_fields(self, stream: MemoryStream, revision: str):
        self.unknown_04 = stream.uint8_read()
        self.unknown_05 = stream.uint8_read()
        if self.unknown_04 > 1:
            logger.debug(
                f"Sound {self.hierarchy_id} has an unrecognized source layout "
                f"({self.unknown_04}). Keeping 16 bytes opaque."
            )
            self.opaque_source = stream.read(16)
        else:
            self.conversion = stream.uint8_read()
            self.unknown_07 = stream.uint8_read()
            self.source = stream.uint8_read()
            self.audio_id = stream.uint32_read()
            self.audio_length = stream.uint32_read()
            self.audio_type = stream.uint8_read()
        self.properties = AudioProperties.from_memory_stream(stream, revision)


class ContainerParameter:

    def __init__(self, param_id: int = 0, parameter: int = 0):
        self.param_id = param_id
        self.parameter = parameter


class Container(AudioObject):
    """
    Random / sequence container.
    """

    hierarchy_type = CONTAINER

    def __init__(self):
        super().__init__()
        self.loop_count: int = 0
        self.unknown_1: int = 0
        self.transition_duration: float = 0.0
        self.unknown_2: float = 0.0
        self.unknown_3: float = 0.0
        self.avoid_last_played_count: int = 0
        self.transition: int = 0
        self.shuffle: bool = False
        self.play_type: int = 0
        self.behavior: int = 0
        self.children: list[int] = []
        self.unknown_parameters: list[ContainerParameter] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        self.properties = AudioProperties.from_memory_stream(stream, revision)

        self.loop_count = stream.uint16_read()
        self.unknown_1 = stream.uint32_read()
        self.transition_duration = stream.float_read()
        self.unknown_2 = stream.float_read()
        self.unknown_3 = stream.float_read()
        self.avoid_last_played_count = stream.uint16_read()
        self.transition = stream.uint8_read()
        self.shuffle = stream.bool_read()
        self.play_type = stream.uint8_read()
        self.behavior = stream.uint8_read()

        # [Children]
        self.children = stream.uint32_array(stream.uint32_read())

        count = stream.uint16_read()
        self.unknown_parameters = [
            ContainerParameter(stream.uint32_read(), stream.uint32_read())
            for _ in range(count)
        ]

    def get_children(self):
        return self.children


class ActorMixer(AudioObject):

    hierarchy_type = ACTOR_MIXER

    def __init__(self):
        super().__init__()
        self.children: list[int] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        self.properties = AudioProperties.from_memory_stream(stream, revision)

        # [Children]
        self.children = stream.uint32_array(stream.uint32_read())

    def get_children(self):
        return self.children


class SwitchAssignment:
    """
    A switch or state value and the children that play for it.
    """

    def __init__(self, switch_id: int = 0, children: list[int] | None = None):
        self.switch_id = switch_id
        self.children = children if children != None else []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        switch_id = stream.uint32_read()
        return SwitchAssignment(switch_id, stream.uint32_array(stream.uint32_read()))


class SwitchChildBehavior:

    def __init__(self):
        self.child_id: int = 0
        self.behavior: int = 0
        self.unknown: int = 0
        self.fade_out: int = 0
        self.fade_in: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        s = SwitchChildBehavior()
        s.child_id = stream.uint32_read()
        s.behavior = stream.uint8_read()
        s.unknown = stream.uint8_read()
        s.fade_out = stream.uint32_read()
        s.fade_in = stream.uint32_read()
        return s


class SwitchContainer(AudioObject):
    """
    eGroupType U8x
    ulGroupID tid
    ulDefaultSwitch tid
    bIsContinuousValidation U8x
    children
    switchGroups (switch id, assigned children)
    switchParams (child id, behavior, fades)
    """

    hierarchy_type = SWITCH_CONTAINER

    def __init__(self):
        super().__init__()
        self.switch_type: int = 0
        self.group_id: int = 0
        self.default_switch_id: int = 0
        self.mode: int = 0
        self.children: list[int] = []
        self.assignments: list[SwitchAssignment] = []
        self.child_behaviors: list[SwitchChildBehavior] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        self.properties = AudioProperties.from_memory_stream(stream, revision)

        self.switch_type = stream.uint8_read()
        self.group_id = stream.uint32_read()
        self.default_switch_id = stream.uint32_read()
        self.mode = stream.uint8_read()

        # [Children]
        self.children = stream.uint32_array(stream.uint32_read())

        self.assignments = stream.array_read(
            stream.uint32_read(), SwitchAssignment.from_memory_stream
        )
        self.child_behaviors = stream.array_read(
            stream.uint32_read(), SwitchChildBehavior.from_memory_stream
        )

    def get_children(self):
        return self.children


class GraphPoint:
    """
    x f32, y f32, following curve shape u32
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, shape: int = 0):
        self.x = x
        self.y = y
        self.shape = shape

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        return GraphPoint(
            stream.float_read(), stream.float_read(), stream.uint32_read()
        )


class BlendRule:

    def __init__(self):
        self.x: int = 0
        self.x_type: int = 0
        self.unknown_05: int = 0
        self.y_type: int = 0
        self.unknown_id: int = 0
        self.unknown_0b: int = 0
        self.points: list[GraphPoint] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        rule = BlendRule()
        rule.x = stream.uint32_read()
        rule.x_type = stream.uint8_read()
        rule.unknown_05 = stream.uint8_read()
        rule.y_type = stream.uint8_read()
        rule.unknown_id = stream.uint32_read()
        rule.unknown_0b = stream.uint8_read()
        rule.points = stream.array_read(
            stream.uint16_read(), GraphPoint.from_memory_stream
        )
        return rule


class BlendTrackChild:

    def __init__(self, child_id: int = 0, points: list[GraphPoint] | None = None):
        self.child_id = child_id
        self.crossfade_points = points if points != None else []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        child_id = stream.uint32_read()
        return BlendTrackChild(
            child_id,
            stream.array_read(stream.uint32_read(), GraphPoint.from_memory_stream)
        )


class BlendTrack:

    def __init__(self):
        self.track_id: int = 0
        self.rules: list[BlendRule] = []
        self.crossfade_id: int = 0
        self.unknown: int = 0
        self.children: list[BlendTrackChild] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        track = BlendTrack()
        track.track_id = stream.uint32_read()
        track.rules = stream.array_read(
            stream.uint16_read(), BlendRule.from_memory_stream
        )
        track.crossfade_id = stream.uint32_read()
        track.unknown = stream.uint8_read()
        track.children = stream.array_read(
            stream.uint32_read(), BlendTrackChild.from_memory_stream
        )
        return track


class BlendContainer(AudioObject):

    hierarchy_type = BLEND_CONTAINER

    def __init__(self):
        super().__init__()
        self.children: list[int] = []
        self.tracks: list[BlendTrack] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        self.properties = AudioProperties.from_memory_stream(stream, revision)

        # [Children]
        self.children = stream.uint32_array(stream.uint32_read())

        self.tracks = stream.array_read(
            stream.uint32_read(), BlendTrack.from_memory_stream
        )

    def get_children(self):
        return self.children


class DuckedBus:
    """
    BusID tid
    DuckVolume f32
    FadeOutTime s32
    FadeInTime s32
    eFadeCurve U8x
    TargetProp U8x
    """

    def __init__(self):
        self.bus_id: int = 0
        self.volume: float = 0.0
        self.fade_out: int = 0
        self.fade_in: int = 0
        self.curve: int = 0
        self.target: int = 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        d = DuckedBus()
        d.bus_id = stream.uint32_read()
        d.volume = stream.float_read()
        d.fade_out = stream.int32_read()
        d.fade_in = stream.int32_read()
        d.curve = stream.uint8_read()
        d.target = stream.uint8_read()
        return d


class AudioBus(HircEntry):
    """
    ulID tid
    OverrideBusId tid
    PropBundle
    positioning U8x
    limit behavior U8x
    u16MaxNumInstance u16
    channel config u32
    HDR release mode U8x
    recovery time u32
    max duck volume f32
    ducks (count u32)
    effects (count U8x, bypass only when count > 0)
    6 reserved bytes
    RTPC
    StateGroups
    """

    hierarchy_type = AUDIO_BUS

    def __init__(self):
        super().__init__()
        self.parent_id: int = 0
        self.parameters = ParameterBag()
        self.positioning: int = 0
        self.limit_behavior: int = 0
        self.instance_limit: int = 0
        self.channel: int = 0
        self.hdr_release_mode: int = 0
        self.ducking_recovery_time: int = 0
        self.ducking_max_volume: float = 0.0
        self.ducked_buses: list[DuckedBus] = []
        self.bypassed_effects: int | None = None
        self.effects: list[Effect] = []
        self.reserved: bytes = b""
        self.rtpcs: list[Rtpc] = []
        self.state_groups: list[StateGroup] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        self.parent_id = stream.uint32_read()

        self.parameters = ParameterBag.from_memory_stream(stream, revision)

        self.positioning = stream.uint8_read()
        self.limit_behavior = stream.uint8_read()
        self.instance_limit = stream.uint16_read()
        self.channel = stream.uint32_read()
        self.hdr_release_mode = stream.uint8_read()

        # [Ducking]
        self.ducking_recovery_time = stream.uint32_read()
        self.ducking_max_volume = stream.float_read()
        self.ducked_buses = stream.array_read(
            stream.uint32_read(), DuckedBus.from_memory_stream
        )

        # [Fx]
        self.bypassed_effects, self.effects = read_effects(stream)

        self.reserved = stream.read(6)

        self.rtpcs = read_rtpcs(stream, revision)
        self.state_groups = read_state_groups(stream, revision)

    def get_parent_id(self):
        return self.parent_id


class AuxiliaryBus(AudioBus):

    hierarchy_type = AUXILIARY_BUS
