"""
AudioProperties, the property bag shared by sounds, containers, mixers and
music objects, together with the smaller readers it is built from.

Every reader takes the active format revision and branches only where the
layouts differ between revisions.
"""

from const import *
from util import MemoryStream, bits, read_u8


class Effect:
    """
    uFxIndex U8x
    fxID tid
    bIsShareSet U8x
    bIsRendered U8x
    """

    def __init__(
        self,
        index: int = 0,
        effect_id: int = 0,
        use_share_sets: bool = False,
        is_rendered: bool = False
    ):
        self.index = index
        self.effect_id = effect_id
        self.use_share_sets = use_share_sets
        self.is_rendered = is_rendered

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        return Effect(
            stream.uint8_read(),
            stream.uint32_read(),
            stream.bool_read(),
            stream.bool_read()
        )


def read_effects(stream: MemoryStream) -> tuple[int | None, list[Effect]]:
    """
    Effect count, then a bypass bitmask only when the count is not zero, then
    the effect records.
    """
    count = stream.uint8_read()
    if count == 0:
        return None, []
    bypass = stream.uint8_read()
    return bypass, [Effect.from_memory_stream(stream) for _ in range(count)]


def read_parameter_value(stream: MemoryStream, code: int) -> int | float:
    return stream.read_format(parameter_wire_format(code), 4)


def canonical_parameter_code(code: int, revision: str) -> int:
    if revision == REV_2023:
        return PARAMETER_REMAP_2023.get(code, code)
    return code


class ParameterBag:
    """
    cProps U8x
    pID[cProps] U8x
    pValue[cProps] (width per type code)

    `types` holds canonical codes. In the 2023 layout the raw codes differ and
    are kept in `raw_types`.
    """

    def __init__(self):
        self.types: list[int] = []
        self.raw_types: list[int] = []
        self.values: list[int | float] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        bag = ParameterBag()

        count = stream.uint8_read()
        bag.raw_types, bag.values = stream.parallel_read(
            count,
            read_u8,
            lambda s, raw: read_parameter_value(
                s, canonical_parameter_code(raw, revision)
            )
        )
        bag.types = [
            canonical_parameter_code(raw, revision) for raw in bag.raw_types
        ]

        return bag

    def __len__(self):
        return len(self.types)

    def get(self, code: int, default=None):
        for t, v in zip(self.types, self.values):
            if t == code:
                return v
        return default

    def items(self):
        return list(zip(self.types, self.values))


class ParameterPairs:
    """
    cProps U8x
    pID[cProps] U8x
    (min, max)[cProps] (f32, f32)
    """

    def __init__(self):
        self.types: list[int] = []
        self.pairs: list[tuple[float, float]] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        pairs = ParameterPairs()

        count = stream.uint8_read()
        pairs.types, pairs.pairs = stream.parallel_read(
            count,
            read_u8,
            lambda s, _: (s.float_read(), s.float_read())
        )

        return pairs

    def __len__(self):
        return len(self.types)


class ControlPointKey:

    def __init__(self, x: float, z: float, y: float, timestamp: int):
        self.x = x
        self.z = z
        self.y = y
        self.timestamp = timestamp

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        return ControlPointKey(
            stream.float_read(),
            stream.float_read(),
            stream.float_read(),
            stream.uint32_read()
        )


class RandomRange:
    """
    Random jitter applied to a user-defined path. The earliest revision has no
    front/back component and no leading pair of unknown words.
    """

    def __init__(
        self,
        left_right: float = 0.0,
        front_back: float | None = None,
        up_down: float = 0.0,
        unknown: tuple[int, int] | None = None
    ):
        self.left_right = left_right
        self.front_back = front_back
        self.up_down = up_down
        self.unknown = unknown


class Positioning:

    def __init__(self):
        self.flags: int = 0
        self.listener_routing: int | None = None
        self.is_game_defined: bool = False
        self.attenuation_id: int = 0
        self.play_settings: int | None = None
        self.transition_time: int = 0
        self.keys: list[ControlPointKey] = []
        self.ranges: list[RandomRange] = []
        self.reserved: bytes = b""

    def has(self, flag: int) -> bool:
        return self.flags & flag != 0

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        if revision == REV_2013:
            return Positioning._from_boolean_layout(stream)

        p = Positioning()
        p.flags = stream.uint8_read()

        if revision == REV_2016:
            has_3d_block = p.has(POS_THREE_DIMENSIONAL)
        else:
            if p.has(POS_TWO_DIMENSIONAL):
                p.listener_routing = stream.uint8_read()
            has_3d_block = p.has(POS_UPDATE_AT_EACH_FRAME) \
                or p.has(POS_USER_DEFINED_SHOULD_LOOP)

        if has_3d_block:
            p.is_game_defined = stream.bool_read()
            p.attenuation_id = stream.uint32_read()
            if not p.is_game_defined:
                p._read_user_defined_path(stream)

        return p

    def _read_user_defined_path(self, stream: MemoryStream):
        self.play_settings = stream.uint8_read()
        self.transition_time = stream.uint32_read()

        key_count = stream.uint32_read()
        self.keys = stream.array_read(key_count, ControlPointKey.from_memory_stream)

        range_count = stream.uint32_read()
        unknowns = [
            (stream.uint32_read(), stream.uint32_read())
            for _ in range(range_count)
        ]
        self.ranges = [
            RandomRange(
                stream.float_read(), stream.float_read(), stream.float_read(),
                unknown
            )
            for unknown in unknowns
        ]

    @staticmethod
    def _from_boolean_layout(stream: MemoryStream):
        """
        Positioning stored as individual booleans, folded into the same flag
        bits the later revisions use.
        """
        p = Positioning()
        reserved = bytearray()

        override = stream.bool_read()
        two_d = panner = spatialization = False
        update_each_frame = should_loop = ignore_orientation = False
        if override:
            two_d = stream.bool_read()
            reserved += stream.read(1)
            if two_d:
                panner = stream.bool_read()
            else:
                p.is_game_defined = stream.uint32_read() == 1
                p.attenuation_id = stream.uint32_read()
                spatialization = stream.bool_read()
                if p.is_game_defined:
                    update_each_frame = stream.bool_read()
                else:
                    p.play_settings = stream.uint8_read()
                    reserved += stream.read(3)
                    should_loop = stream.bool_read()
                    p.transition_time = stream.uint32_read()
                    # Stored as "follow listener orientation"
                    ignore_orientation = not stream.bool_read()

                    key_count = stream.uint32_read()
                    p.keys = stream.array_read(
                        key_count, ControlPointKey.from_memory_stream
                    )
                    range_count = stream.uint32_read()
                    p.ranges = [
                        RandomRange(stream.float_read(), None, stream.float_read())
                        for _ in range(range_count)
                    ]

        p.flags = bits(
            override, two_d, panner, False, spatialization, should_loop,
            update_each_frame, ignore_orientation
        )
        p.reserved = bytes(reserved)
        return p


class AuxSends:

    def __init__(self):
        self.flags: int = 0
        self.bus_ids: list[int] = []
        self.reflections_bus_id: int | None = None

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        aux = AuxSends()

        if revision == REV_2013:
            aux.flags = bits(
                stream.bool_read(),
                stream.bool_read(),
                stream.bool_read(),
                stream.bool_read()
            )
        else:
            aux.flags = stream.uint8_read()

        if aux.flags & AUX_OVERRIDE_AUX_SENDS:
            aux.bus_ids = stream.uint32_array(4)

        if revision in (REV_2021, REV_2023):
            aux.reflections_bus_id = stream.uint32_read()

        return aux


class LimitSettings:
    """
    Playback limit, virtual voice and HDR settings.
    """

    def __init__(self):
        self.limit_behavior: int = 0
        self.virtual_voice_return: int = 0
        self.instance_limit: int = 0
        self.virtual_voice_behavior: int = 0
        self.hdr: int = 0
        self.reserved: bytes = b""

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        limits = LimitSettings()

        if revision != REV_2013:
            limits.limit_behavior = stream.uint8_read()
            limits.virtual_voice_return = stream.uint8_read()
            limits.instance_limit = stream.uint16_read()
            limits.virtual_voice_behavior = stream.uint8_read()
            limits.hdr = stream.uint8_read()
            return limits

        limits.reserved = stream.read(1)
        discard_newest = stream.bool_read()
        use_virtual = stream.bool_read()
        limits.instance_limit = stream.uint16_read()
        limit_globally = stream.bool_read()
        limits.virtual_voice_behavior = stream.uint8_read()
        override_playback_limit = stream.bool_read()
        override_virtual_voice = stream.bool_read()
        limits.limit_behavior = bits(
            discard_newest,
            use_virtual,
            limit_globally,
            override_playback_limit,
            override_virtual_voice
        )
        limits.hdr = bits(
            stream.bool_read(),
            stream.bool_read(),
            stream.bool_read(),
            stream.bool_read()
        )
        return limits


class StateProperty:

    def __init__(self, property_id: int = 0, accum_type: int = 0, in_db: int = 0):
        self.property_id = property_id
        self.accum_type = accum_type
        self.in_db = in_db


class State:
    """
    Older layouts point at a settings object. The 2023 layout embeds the
    property list instead.
    """

    def __init__(
        self,
        state_id: int = 0,
        settings_id: int | None = None,
        properties: list[tuple[int, float]] | None = None
    ):
        self.state_id = state_id
        self.settings_id = settings_id
        self.properties = properties if properties != None else []


class StateGroup:

    def __init__(self, group_id: int = 0, change_at: int = 0):
        self.group_id = group_id
        self.change_at = change_at
        self.states: list[State] = []


def read_state_groups(stream: MemoryStream, revision: str) -> list[StateGroup]:
    wide_counts = revision in (REV_2013, REV_2016)

    group_count = stream.uint32_read() if wide_counts else stream.uint8_read()
    groups: list[StateGroup] = []
    for _ in range(group_count):
        group = StateGroup(stream.uint32_read(), stream.uint8_read())
        state_count = stream.uint16_read() if wide_counts else stream.uint8_read()
        for _ in range(state_count):
            state_id = stream.uint32_read()
            if revision == REV_2023:
                # Ids first, then the values
                ids, values = stream.parallel_read(
                    stream.uint16_read(),
                    MemoryStream.uint16_read,
                    lambda s, _: s.float_read()
                )
                group.states.append(State(state_id, None, list(zip(ids, values))))
            else:
                group.states.append(State(state_id, stream.uint32_read()))
        groups.append(group)
    return groups


class RtpcPoint:

    def __init__(self, x: float, y: float, shape: int, padding: bytes = b""):
        self.x = x
        self.y = y
        self.shape = shape
        self.padding = padding


class Rtpc:
    """
    RTPCID tid
    (bIsMidi U8x, bIsGeneral U8x, ParamID U8x) | ParamID u32 (2013)
    rtpcCurveID tid
    eScaling U8x
    ulSize u16
    pRTPCMgr[ulSize] (f32, f32, shape)
    """

    def __init__(self):
        self.rtpc_id: int = 0
        self.is_midi: bool = False
        self.is_general: bool = False
        self.parameter: int = 0
        self.curve_id: int = 0
        self.scaling: int = 0
        self.points: list[RtpcPoint] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        rtpc = Rtpc()

        rtpc.rtpc_id = stream.uint32_read()
        if revision == REV_2013:
            rtpc.parameter = stream.uint32_read()
        else:
            rtpc.is_midi = stream.bool_read()
            rtpc.is_general = stream.bool_read()
            rtpc.parameter = stream.uint8_read()
        rtpc.curve_id = stream.uint32_read()
        rtpc.scaling = stream.uint8_read()

        point_count = stream.uint16_read()
        for _ in range(point_count):
            x = stream.float_read()
            y = stream.float_read()
            if revision == REV_2013:
                rtpc.points.append(RtpcPoint(x, y, stream.uint32_read()))
            else:
                rtpc.points.append(RtpcPoint(x, y, stream.uint8_read(), stream.read(3)))

        return rtpc


def read_rtpcs(stream: MemoryStream, revision: str) -> list[Rtpc]:
    count = stream.uint16_read()
    return [Rtpc.from_memory_stream(stream, revision) for _ in range(count)]


class AudioProperties:

    def __init__(self):
        self.override_effects: bool = False
        self.bypassed_effects: int | None = None
        self.effects: list[Effect] = []
        self.flags: int | None = None
        self.reserved: bytes = b""

        self.output_bus_id: int = 0
        self.parent_id: int = 0
        self.playback_behavior: int = 0

        self.parameters = ParameterBag()
        self.parameter_pairs = ParameterPairs()

        self.positioning = Positioning()
        self.aux_sends = AuxSends()
        self.limits = LimitSettings()

        self.state_properties: list[StateProperty] = []
        self.state_groups: list[StateGroup] = []
        self.rtpcs: list[Rtpc] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        p = AudioProperties()

        # [Fx]
        p.override_effects = stream.bool_read()
        p.bypassed_effects, p.effects = read_effects(stream)

        if revision == REV_2016:
            p.flags = stream.uint8_read()
        elif revision in (REV_2019, REV_2021):
            p.flags = stream.uint8_read()
            p.reserved = stream.read(2)
        elif revision == REV_2023:
            p.reserved = stream.read(2)

        p.output_bus_id = stream.uint32_read()
        p.parent_id = stream.uint32_read()

        if revision == REV_2013:
            p.playback_behavior = bits(stream.bool_read(), stream.bool_read())
        else:
            p.playback_behavior = stream.uint8_read()

        # [Properties]
        p.parameters = ParameterBag.from_memory_stream(stream, revision)
        p.parameter_pairs = ParameterPairs.from_memory_stream(stream)

        # [Positioning]
        p.positioning = Positioning.from_memory_stream(stream, revision)

        # [Aux Params]
        p.aux_sends = AuxSends.from_memory_stream(stream, revision)

        # [Adv Setting Params]
        p.limits = LimitSettings.from_memory_stream(stream, revision)

        # [State]
        if revision in (REV_2019, REV_2021, REV_2023):
            count = stream.uint8_read()
            p.state_properties = [
                StateProperty(
                    stream.uint8_read(),
                    stream.uint8_read(),
                    stream.uint8_read()
                )
                for _ in range(count)
            ]
        p.state_groups = read_state_groups(stream, revision)

        # [RTPC]
        p.rtpcs = read_rtpcs(stream, revision)

        return p
