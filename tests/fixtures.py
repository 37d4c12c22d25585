"""
Byte builders for hand made SoundBank fixtures.

Every builder returns the exact little-endian bytes a decoder expects, so a
test can assert that the decoder consumed all of them.
"""

import struct

from const import *


def u8(v: int) -> bytes:
    return struct.pack("<B", v)


def u16(v: int) -> bytes:
    return struct.pack("<H", v)


def i16(v: int) -> bytes:
    return struct.pack("<h", v)


def u32(v: int) -> bytes:
    return struct.pack("<I", v)


def i32(v: int) -> bytes:
    return struct.pack("<i", v)


def f32(v: float) -> bytes:
    return struct.pack("<f", v)


def f64(v: float) -> bytes:
    return struct.pack("<d", v)


def u32_list(ids: list[int]) -> bytes:
    """
    u32 count followed by the ids
    """
    return u32(len(ids)) + b"".join(u32(i) for i in ids)


def parameter_bag(parameters: list[tuple[int, str, int | float]] = []) -> bytes:
    """
    parameters: (raw type code, struct format of the value, value)
    """
    data = u8(len(parameters))
    data += b"".join(u8(code) for code, _, _ in parameters)
    data += b"".join(struct.pack("<" + fmt, value) for _, fmt, value in parameters)
    return data


def parameter_pairs(pairs: list[tuple[int, float, float]] = []) -> bytes:
    data = u8(len(pairs))
    data += b"".join(u8(code) for code, _, _ in pairs)
    data += b"".join(f32(low) + f32(high) for _, low, high in pairs)
    return data


def state_groups(revision: str, groups: list[tuple[int, list[tuple]]] = []) -> bytes:
    """
    groups: (group id, states). A state is (state id, settings id), or
    (state id, [(property id, value)]) in the 2023 layout.
    """
    wide = revision in (REV_2013, REV_2016)
    data = u32(len(groups)) if wide else u8(len(groups))
    for group_id, states in groups:
        data += u32(group_id) + u8(0)
        data += u16(len(states)) if wide else u8(len(states))
        for state_id, settings in states:
            data += u32(state_id)
            if revision == REV_2023:
                data += u16(len(settings))
                data += b"".join(u16(p) for p, _ in settings)
                data += b"".join(f32(v) for _, v in settings)
            else:
                data += u32(settings)
    return data


def rtpc(
    revision: str,
    rtpc_id: int,
    parameter: int,
    curve_id: int,
    points: list[tuple[float, float, int]]
) -> bytes:
    data = u32(rtpc_id)
    if revision == REV_2013:
        data += u32(parameter)
    else:
        data += u8(0) + u8(0) + u8(parameter)
    data += u32(curve_id) + u8(0) + u16(len(points))
    for x, y, shape in points:
        data += f32(x) + f32(y)
        if revision == REV_2013:
            data += u32(shape)
        else:
            data += u8(shape) + b"\x00\x00\x00"
    return data


def rtpcs(revision: str, curves: list[bytes] = []) -> bytes:
    return u16(len(curves)) + b"".join(curves)


def audio_properties(
    revision: str,
    parent_id: int = 0,
    output_bus_id: int = 0,
    parameters: list[tuple[int, str, int | float]] = [],
    positioning: bytes | None = None,
    aux_sends: bytes | None = None,
    limits: bytes | None = None,
    groups: bytes | None = None,
    curves: bytes | None = None
) -> bytes:
    """
    An AudioProperties block with no effects. Every sub-block can be swapped
    for hand made bytes, otherwise its empty form is used.
    """
    data = u8(0) + u8(0)
    match revision:
        case "2016":
            data += u8(0)
        case "2019" | "2021":
            data += u8(0) + b"\x00\x00"
        case "2023":
            data += b"\x00\x00"
    data += u32(output_bus_id) + u32(parent_id)
    data += b"\x00\x00" if revision == REV_2013 else u8(0)

    data += parameter_bag(parameters)
    data += u8(0)

    if positioning == None:
        positioning = u8(0)
    data += positioning

    if aux_sends == None:
        aux_sends = b"\x00" * 4 if revision == REV_2013 else u8(0)
        if revision in (REV_2021, REV_2023):
            aux_sends += u32(0)
    data += aux_sends

    if limits == None:
        limits = b"\x00" * (13 if revision == REV_2013 else 6)
    data += limits

    if revision in (REV_2019, REV_2021, REV_2023):
        data += u8(0)
    data += groups if groups != None else state_groups(revision)
    data += curves if curves != None else rtpcs(revision)
    return data


def object_blob(object_id: int, body: bytes) -> bytes:
    """
    What a decoder receives: the id and the kind specific payload.
    """
    return u32(object_id) + body


def hirc_object(kind: int, object_id: int, body: bytes) -> bytes:
    return u8(kind) + u32(4 + len(body)) + u32(object_id) + body


def hirc_payload(*objects: bytes) -> bytes:
    return u32(len(objects)) + b"".join(objects)


def chunk(tag: str, payload: bytes) -> bytes:
    return tag.encode("ascii") + u32(len(payload)) + payload


def bank_header(version: int, bank_id: int, extra: bytes = b"") -> bytes:
    return u32(version) + u32(bank_id) + extra


def string_table(names: dict[int, str]) -> bytes:
    data = u32(1) + u32(len(names))
    for entry_id, name in names.items():
        encoded = name.encode("utf-8")
        data += u8(len(encoded)) + u32(entry_id) + encoded
    return data


def path_node(owner: int, start: int, count: int, weight: int = 50, probability: int = 100) -> bytes:
    return struct.pack("<IHHHH", owner, start, count, weight, probability)


def path_leaf(owner: int, target: int, weight: int = 50, probability: int = 100) -> bytes:
    return struct.pack("<IIHH", owner, target, weight, probability)


# [Actor-Mixer Hierarchy]
def actor_mixer_body(revision: str, parent_id: int = 0, children: list[int] = []) -> bytes:
    return audio_properties(revision, parent_id) + u32_list(children)


def sound_body(revision: str, parent_id: int = 0, audio_id: int = 0) -> bytes:
    source = u8(0) + u8(0) + u8(0) + u8(0) + u8(SOURCE_EMBEDDED)
    source += u32(audio_id) + u32(1024) + u8(0)
    return source + audio_properties(revision, parent_id)


def audio_bus_body(
    revision: str,
    parent_id: int = 0,
    effects: bytes = b"\x00",
    ducks: list[bytes] = [],
    groups: bytes | None = None,
    curves: bytes | None = None
) -> bytes:
    data = u32(parent_id) + parameter_bag()
    data += u8(0) + u8(0) + u16(4) + u32(0x3) + u8(0)
    data += u32(500) + f32(-96.0) + u32(len(ducks)) + b"".join(ducks)
    data += effects
    data += b"\x00" * 6
    data += curves if curves != None else rtpcs(revision)
    data += groups if groups != None else state_groups(revision)
    return data


def ducked_bus(bus_id: int, volume: float = -6.0) -> bytes:
    return u32(bus_id) + f32(volume) + u32(100) + u32(200) + u8(4) + u8(0)
# [End]


# [Events]
def event_body(revision: str, action_ids: list[int]) -> bytes:
    if revision in (REV_2013, REV_2016):
        count = u32(len(action_ids))
    else:
        count = u8(len(action_ids))
    return count + b"".join(u32(i) for i in action_ids)


def event_action_head(
    action_type: int,
    target_id: int,
    scope: int = SCOPE_GAME_OBJECT,
    parameters: list[tuple[int, str, int | float]] = []
) -> bytes:
    return u8(scope) + u8(action_type) + u32(target_id) + u8(0) \
        + parameter_bag(parameters)
# [End]


# [Interactive Music Hierarchy]
def music_grid(period: float = 2000.0, tempo: float = 120.0) -> bytes:
    return f64(period) + f64(0.0) + f32(tempo) + u8(4) + u8(4) + u8(0)


def music_stinger(trigger_id: int, segment_id: int, narrow: bool = False) -> bytes:
    data = u32(trigger_id) + u32(segment_id) + u32(0) + u32(0) + u32(0)
    return data + (u8(1) if narrow else u32(1))


def music_prefix(
    revision: str,
    parent_id: int = 0,
    children: list[int] = [],
    period: float = 2000.0,
    stingers: list[bytes] = []
) -> bytes:
    data = b"" if revision == REV_2013 else u8(0)
    data += audio_properties(revision, parent_id)
    data += u32_list(children)
    data += music_grid(period)
    data += u32(len(stingers)) + b"".join(stingers)
    return data


def music_cue(revision: str, cue_id: int, time: float, name: str) -> bytes:
    data = u32(cue_id) + f64(time)
    encoded = name.encode("utf-8")
    if revision in (REV_2013, REV_2016):
        return data + u32(len(encoded) + 1) + encoded + b"\x00"
    return data + encoded + b"\x00"


def music_segment_body(
    revision: str,
    parent_id: int = 0,
    children: list[int] = [],
    duration: float = 8000.0,
    cues: list[tuple[int, float, str]] = []
) -> bytes:
    data = music_prefix(revision, parent_id, children)
    data += f64(duration) + u32(len(cues))
    data += b"".join(music_cue(revision, *cue) for cue in cues)
    return data


def music_fade(duration: int = 0, curve: int = 4, offset: int = 0) -> bytes:
    return u32(duration) + u32(curve) + i32(offset)


def music_transition(
    revision: str,
    sources: list[int],
    destinations: list[int],
    segment_id: int | None = None
) -> bytes:
    data = u32_list(sources) + u32_list(destinations)
    data += music_fade(500) + u32(1) + u32(0) + u8(1)
    data += music_fade(250, offset=-10) + u32(0) + u32(0)
    data += u16(2) if revision in (REV_2013, REV_2016) else u32(2)
    data += u8(0) + u8(0)
    if segment_id == None:
        return data + u8(0)
    data += u8(1) + u32(segment_id) + music_fade() + music_fade() + u8(1) + u8(1)
    return data


def playlist_item(
    revision: str,
    segment_id: int,
    element_type: int,
    children: list[bytes] = [],
    loop: int = 1
) -> bytes:
    data = u32(segment_id) + u32(0) + u32(len(children)) + u32(element_type)
    data += u16(loop)
    if revision != REV_2013:
        data += i16(0) + i16(0)
    data += u32(50000) + u16(0) + u8(0) + u8(0)
    return data + b"".join(children)
# [End]
