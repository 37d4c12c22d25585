# [Format Revision]
REV_2013 = "2013"
REV_2016 = "2016"
REV_2019 = "2019"
REV_2021 = "2021"
REV_2023 = "2023"
REV_AUTO = "auto"

REVISIONS = (REV_2013, REV_2016, REV_2019, REV_2021, REV_2023)
DEFAULT_REVISION = REV_2016
# [End]


def revision_for_bank_version(version: int) -> str:
    """
    Resolve a format revision from the BKHD bank version.
    """
    if version < 0x70:
        return REV_2013
    if version < 0x84:
        return REV_2016
    if version < 0x8C:
        return REV_2019
    if version < 0x98:
        return REV_2021
    return REV_2023


def is_revision_at_least(revision: str, minimum: str) -> bool:
    return REVISIONS.index(revision) >= REVISIONS.index(minimum)


# [Hierarchy Type ID]
SETTINGS = 0x01
SOUND = 0x02
EVENT_ACTION = 0x03
EVENT = 0x04
CONTAINER = 0x05
SWITCH_CONTAINER = 0x06
ACTOR_MIXER = 0x07
AUDIO_BUS = 0x08
BLEND_CONTAINER = 0x09
MUSIC_SEGMENT = 0x0A
MUSIC_TRACK = 0x0B
MUSIC_SWITCH_CONTAINER = 0x0C
MUSIC_PLAYLIST_CONTAINER = 0x0D
ATTENUATION = 0x0E
DIALOGUE_EVENT = 0x0F
MOTION_BUS = 0x10
MOTION_EFFECT = 0x11
EFFECT = 0x12
AUXILIARY_BUS = 0x14
# [End]

HircType = {
    SETTINGS: "Settings",
    SOUND: "Sound",
    EVENT_ACTION: "Event Action",
    EVENT: "Event",
    CONTAINER: "Random/Sequence Container",
    SWITCH_CONTAINER: "Switch Container",
    ACTOR_MIXER: "Actor-Mixer",
    AUDIO_BUS: "Audio Bus",
    BLEND_CONTAINER: "Blend Container",
    MUSIC_SEGMENT: "Music Segment",
    MUSIC_TRACK: "Music Track",
    MUSIC_SWITCH_CONTAINER: "Music Switch Container",
    MUSIC_PLAYLIST_CONTAINER: "Music Playlist Container",
    ATTENUATION: "Attenuation",
    DIALOGUE_EVENT: "Dialogue Event",
    MOTION_BUS: "Motion Bus",
    MOTION_EFFECT: "Motion Effect",
    EFFECT: "Effect",
    AUXILIARY_BUS: "Auxiliary Bus",
}


def hirc_type_name(kind: int) -> str:
    return HircType.get(kind, f"Unknown ({kind:#04x})")


# [Parameter Wire Format]
WIRE_FLOAT32 = "f"
WIRE_INT32 = "i"
WIRE_UINT32 = "I"
# [End]

# [Canonical Parameter Type]
PARAM_VOICE_VOLUME = 0x00
PARAM_VOICE_PITCH = 0x02
PARAM_VOICE_LOW_PASS = 0x03
PARAM_VOICE_HIGH_PASS = 0x04
PARAM_BUS_VOLUME = 0x05
PARAM_MAKE_UP_GAIN = 0x06
PARAM_PLAYBACK_PRIORITY = 0x07
PARAM_PLAYBACK_PRIORITY_OFFSET = 0x08
PARAM_MOTION_TO_VOLUME_OFFSET = 0x09
PARAM_MOTION_LOW_PASS = 0x0A
PARAM_MUTE_RATIO = 0x0B  # 2023 remap only
PARAM_POSITIONING_PANNER_X = 0x0C
PARAM_POSITIONING_PANNER_Y = 0x0D
PARAM_POSITIONING_CENTER_PERCENTAGE = 0x0E
PARAM_ACTION_DELAY = 0x0F
PARAM_ACTION_FADE_IN_TIME = 0x10
PARAM_PROBABILITY = 0x11
PARAM_OVERRIDE_AUX_BUS_0_VOLUME = 0x13
PARAM_OVERRIDE_AUX_BUS_1_VOLUME = 0x14
PARAM_OVERRIDE_AUX_BUS_2_VOLUME = 0x15
PARAM_OVERRIDE_AUX_BUS_3_VOLUME = 0x16
PARAM_GAME_DEFINED_AUX_SEND_VOLUME = 0x17
PARAM_OVERRIDE_BUS_VOLUME = 0x18
PARAM_OVERRIDE_BUS_HIGH_PASS = 0x19
PARAM_OVERRIDE_BUS_LOW_PASS = 0x1A
PARAM_HDR_THRESHOLD = 0x1B
PARAM_HDR_RATIO = 0x1C
PARAM_HDR_RELEASE_TIME = 0x1D
PARAM_HDR_OUTPUT_GAME_PARAM = 0x1E
PARAM_HDR_OUTPUT_GAME_PARAM_MIN = 0x1F
PARAM_HDR_OUTPUT_GAME_PARAM_MAX = 0x20
PARAM_HDR_ENVELOPE_ACTIVE_RANGE = 0x21
PARAM_MIDI_NOTE_TRACKING = 0x2E
PARAM_MIDI_TRANSPOSITION = 0x2F
PARAM_MIDI_VELOCITY_OFFSET = 0x30
PARAM_MIDI_KEY_RANGE_MIN = 0x31
PARAM_MIDI_KEY_RANGE_MAX = 0x32
PARAM_MIDI_VELOCITY_RANGE_MIN = 0x33
PARAM_MIDI_VELOCITY_RANGE_MAX = 0x34
PARAM_PLAYBACK_SPEED = 0x36
PARAM_MIDI_CLIP_TEMPO_SOURCE = 0x37
PARAM_LOOP_TIME = 0x3A
PARAM_INITIAL_DELAY = 0x3B
# [End]

ParameterType = {
    PARAM_VOICE_VOLUME: "VoiceVolume",
    PARAM_VOICE_PITCH: "VoicePitch",
    PARAM_VOICE_LOW_PASS: "VoiceLowPassFilter",
    PARAM_VOICE_HIGH_PASS: "VoiceHighPassFilter",
    PARAM_BUS_VOLUME: "BusVolume",
    PARAM_MAKE_UP_GAIN: "MakeUpGain",
    PARAM_PLAYBACK_PRIORITY: "PlaybackPriority",
    PARAM_PLAYBACK_PRIORITY_OFFSET: "PlaybackPriorityOffset",
    PARAM_MOTION_TO_VOLUME_OFFSET: "MotionToVolumeOffset",
    PARAM_MOTION_LOW_PASS: "MotionLowPassFilter",
    PARAM_MUTE_RATIO: "MuteRatio",
    PARAM_POSITIONING_PANNER_X: "PositioningPannerX",
    PARAM_POSITIONING_PANNER_Y: "PositioningPannerY",
    PARAM_POSITIONING_CENTER_PERCENTAGE: "PositioningCenterPercentage",
    PARAM_ACTION_DELAY: "ActionDelay",
    PARAM_ACTION_FADE_IN_TIME: "ActionFadeInTime",
    PARAM_PROBABILITY: "Probability",
    PARAM_OVERRIDE_AUX_BUS_0_VOLUME: "OverrideAuxBus0Volume",
    PARAM_OVERRIDE_AUX_BUS_1_VOLUME: "OverrideAuxBus1Volume",
    PARAM_OVERRIDE_AUX_BUS_2_VOLUME: "OverrideAuxBus2Volume",
    PARAM_OVERRIDE_AUX_BUS_3_VOLUME: "OverrideAuxBus3Volume",
    PARAM_GAME_DEFINED_AUX_SEND_VOLUME: "GameDefinedAuxSendVolume",
    PARAM_OVERRIDE_BUS_VOLUME: "OverrideBusVolume",
    PARAM_OVERRIDE_BUS_HIGH_PASS: "OverrideBusHighPassFilter",
    PARAM_OVERRIDE_BUS_LOW_PASS: "OverrideBusLowPassFilter",
    PARAM_HDR_THRESHOLD: "HdrThreshold",
    PARAM_HDR_RATIO: "HdrRatio",
    PARAM_HDR_RELEASE_TIME: "HdrReleaseTime",
    PARAM_HDR_OUTPUT_GAME_PARAM: "HdrOutputGameParameter",
    PARAM_HDR_OUTPUT_GAME_PARAM_MIN: "HdrOutputGameParameterMin",
    PARAM_HDR_OUTPUT_GAME_PARAM_MAX: "HdrOutputGameParameterMax",
    PARAM_HDR_ENVELOPE_ACTIVE_RANGE: "HdrEnvelopeActiveRange",
    PARAM_MIDI_NOTE_TRACKING: "MidiNoteTracking",
    PARAM_MIDI_TRANSPOSITION: "MidiTransposition",
    PARAM_MIDI_VELOCITY_OFFSET: "MidiVelocityOffset",
    PARAM_MIDI_KEY_RANGE_MIN: "MidiFiltersKeyRangeMin",
    PARAM_MIDI_KEY_RANGE_MAX: "MidiFiltersKeyRangeMax",
    PARAM_MIDI_VELOCITY_RANGE_MIN: "MidiFiltersVelocityRangeMin",
    PARAM_MIDI_VELOCITY_RANGE_MAX: "MidiFiltersVelocityRangeMax",
    PARAM_PLAYBACK_SPEED: "PlaybackSpeed",
    PARAM_MIDI_CLIP_TEMPO_SOURCE: "MidiClipTempoSourceIsFile",
    PARAM_LOOP_TIME: "LoopTime",
    PARAM_INITIAL_DELAY: "InitialDelay",
}

# Wire format of every parameter value, keyed by canonical type code. Codes
# absent from this table are read as 32-bit floats.
PARAMETER_WIRE_FORMAT: dict[int, str] = {
    code: WIRE_FLOAT32 for code in ParameterType
}
PARAMETER_WIRE_FORMAT[PARAM_MIDI_TRANSPOSITION] = WIRE_INT32
PARAMETER_WIRE_FORMAT[PARAM_MIDI_VELOCITY_OFFSET] = WIRE_INT32
PARAMETER_WIRE_FORMAT[PARAM_LOOP_TIME] = WIRE_UINT32


def parameter_wire_format(code: int) -> str:
    return PARAMETER_WIRE_FORMAT.get(code, WIRE_FLOAT32)


# Raw 2023 parameter codes to canonical codes. Codes missing from the table
# are kept as is.
PARAMETER_REMAP_2023: dict[int, int] = {
    0x00: PARAM_VOICE_VOLUME,
    0x01: PARAM_VOICE_PITCH,
    0x02: PARAM_VOICE_LOW_PASS,
    0x03: PARAM_VOICE_HIGH_PASS,
    0x04: PARAM_BUS_VOLUME,
    0x05: PARAM_MAKE_UP_GAIN,
    0x06: PARAM_PLAYBACK_PRIORITY,
    0x07: PARAM_MUTE_RATIO,
    0x08: PARAM_OVERRIDE_AUX_BUS_0_VOLUME,
    0x09: PARAM_OVERRIDE_AUX_BUS_1_VOLUME,
    0x0A: PARAM_OVERRIDE_AUX_BUS_2_VOLUME,
    0x0B: PARAM_OVERRIDE_AUX_BUS_3_VOLUME,
    0x0C: PARAM_GAME_DEFINED_AUX_SEND_VOLUME,
    0x0D: PARAM_OVERRIDE_BUS_VOLUME,
    0x0E: PARAM_OVERRIDE_BUS_HIGH_PASS,
    0x0F: PARAM_OVERRIDE_BUS_LOW_PASS,
    0x1B: PARAM_HDR_THRESHOLD,
    0x1C: PARAM_HDR_RATIO,
    0x1D: PARAM_HDR_RELEASE_TIME,
    0x1E: PARAM_HDR_ENVELOPE_ACTIVE_RANGE,
    0x1F: PARAM_MIDI_TRANSPOSITION,
    0x20: PARAM_MIDI_VELOCITY_OFFSET,
    0x21: PARAM_PLAYBACK_SPEED,
    0x22: PARAM_INITIAL_DELAY,
    0x23: PARAM_POSITIONING_PANNER_X,
    0x24: PARAM_POSITIONING_PANNER_Y,
    0x29: PARAM_POSITIONING_CENTER_PERCENTAGE,
    0x3A: PARAM_LOOP_TIME,
    0x3B: PARAM_PROBABILITY,
    0x3D: PARAM_HDR_OUTPUT_GAME_PARAM,
    0x3E: PARAM_HDR_OUTPUT_GAME_PARAM_MIN,
    0x3F: PARAM_HDR_OUTPUT_GAME_PARAM_MAX,
    0x4D: PARAM_MIDI_KEY_RANGE_MIN,
    0x4E: PARAM_MIDI_KEY_RANGE_MAX,
    0x4F: PARAM_MIDI_VELOCITY_RANGE_MIN,
    0x50: PARAM_MIDI_VELOCITY_RANGE_MAX,
}


# [Positioning Flags]
POS_OVERRIDE_PARENT = 0x01
POS_TWO_DIMENSIONAL = 0x02
POS_PANNER_ENABLED = 0x04
POS_THREE_DIMENSIONAL = 0x08
POS_SPATIALIZATION = 0x10
POS_USER_DEFINED_SHOULD_LOOP = 0x20
POS_UPDATE_AT_EACH_FRAME = 0x40
POS_IGNORE_LISTENER_ORIENTATION = 0x80
# [End]

# [Aux Send Flags]
AUX_OVERRIDE_GAME_DEFINED = 0x01
AUX_USE_GAME_DEFINED = 0x02
AUX_OVERRIDE_USER_DEFINED = 0x04
AUX_OVERRIDE_AUX_SENDS = 0x08
# [End]

# [Limit Flags (earliest revision)]
LIMIT_DISCARD_NEWEST = 0x01
LIMIT_USE_VIRTUAL = 0x02
LIMIT_GLOBALLY = 0x04
LIMIT_OVERRIDE_PARENT_PLAYBACK = 0x08
LIMIT_OVERRIDE_PARENT_VIRTUAL_VOICE = 0x10
# [End]

# [Playback Priority Flags (earliest revision)]
PRIORITY_OVERRIDE_PARENT = 0x01
PRIORITY_OFFSET_AT_MAX_DISTANCE = 0x02
# [End]


# [Action Type]
ACTION_STOP = 0x01
ACTION_PAUSE = 0x02
ACTION_RESUME = 0x03
ACTION_PLAY = 0x04
ACTION_TRIGGER = 0x05
ACTION_MUTE = 0x06
ACTION_UNMUTE = 0x07
ACTION_SET_VOICE_PITCH = 0x08
ACTION_RESET_VOICE_PITCH = 0x09
ACTION_SET_VOICE_VOLUME = 0x0A
ACTION_RESET_VOICE_VOLUME = 0x0B
ACTION_SET_BUS_VOLUME = 0x0C
ACTION_RESET_BUS_VOLUME = 0x0D
ACTION_SET_VOICE_LOW_PASS = 0x0E
ACTION_RESET_VOICE_LOW_PASS = 0x0F
ACTION_ENABLE_STATE = 0x10
ACTION_DISABLE_STATE = 0x11
ACTION_SET_STATE = 0x12
ACTION_SET_GAME_PARAMETER = 0x13
ACTION_RESET_GAME_PARAMETER = 0x14
ACTION_SET_SWITCH = 0x19
ACTION_TOGGLE_BYPASS = 0x1A
ACTION_RESET_BYPASS_EFFECT = 0x1B
ACTION_BREAK = 0x1C
ACTION_SEEK = 0x1E
# [End]

ActionType = {
    ACTION_STOP: "Stop",
    ACTION_PAUSE: "Pause",
    ACTION_RESUME: "Resume",
    ACTION_PLAY: "Play",
    ACTION_TRIGGER: "Trigger",
    ACTION_MUTE: "Mute",
    ACTION_UNMUTE: "UnMute",
    ACTION_SET_VOICE_PITCH: "SetVoicePitch",
    ACTION_RESET_VOICE_PITCH: "ResetVoicePitch",
    ACTION_SET_VOICE_VOLUME: "SetVoiceVolume",
    ACTION_RESET_VOICE_VOLUME: "ResetVoiceVolume",
    ACTION_SET_BUS_VOLUME: "SetBusVolume",
    ACTION_RESET_BUS_VOLUME: "ResetBusVolume",
    ACTION_SET_VOICE_LOW_PASS: "SetVoiceLowPassFilter",
    ACTION_RESET_VOICE_LOW_PASS: "ResetVoiceLowPassFilter",
    ACTION_ENABLE_STATE: "EnableState",
    ACTION_DISABLE_STATE: "DisableState",
    ACTION_SET_STATE: "SetState",
    ACTION_SET_GAME_PARAMETER: "SetGameParameter",
    ACTION_RESET_GAME_PARAMETER: "ResetGameParameter",
    ACTION_SET_SWITCH: "SetSwitch",
    ACTION_TOGGLE_BYPASS: "ToggleBypass",
    ACTION_RESET_BYPASS_EFFECT: "ResetBypassEffect",
    ACTION_BREAK: "Break",
    ACTION_SEEK: "Seek",
}

# [Action Scope]
SCOPE_SWITCH_OR_TRIGGER = 0x01
SCOPE_GLOBAL = 0x02
SCOPE_GAME_OBJECT = 0x03
SCOPE_STATE = 0x04
SCOPE_ALL = 0x05
SCOPE_ALL_ALT = 0x08
SCOPE_ALL_EXCEPT = 0x09
# [End]


# [Music]
MUSIC_TRACK_NORMAL = 0
MUSIC_TRACK_RANDOM_STEP = 1
MUSIC_TRACK_SEQUENCE_STEP = 2
MUSIC_TRACK_SWITCH = 3

PLAYLIST_SEQUENCE_CONTINUOUS = 0
PLAYLIST_SEQUENCE_STEP = 1
PLAYLIST_RANDOM_CONTINUOUS = 2
PLAYLIST_RANDOM_STEP = 3
PLAYLIST_SEGMENT = 0xFFFFFFFF

SOURCE_EMBEDDED = 0
SOURCE_STREAMED_ZERO_LATENCY = 1
SOURCE_STREAMED = 2

# 2013 tracks number the streamed kinds the other way round
SOURCE_TYPES_2013 = {
    0: SOURCE_EMBEDDED,
    1: SOURCE_STREAMED,
    2: SOURCE_STREAMED_ZERO_LATENCY,
}
# [End]


# [Chunk Tag]
BKHD = "BKHD"
DIDX = "DIDX"
DATA = "DATA"
HIRC = "HIRC"
STID = "STID"
STMG = "STMG"
ENVS = "ENVS"

KNOWN_CHUNK_TAGS = (BKHD, DIDX, DATA, HIRC, STID, STMG, ENVS)
# [End]
