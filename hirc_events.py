from audio_properties import ParameterBag, ParameterPairs
from const import *
from hirc_entry import HircEntry
from path_tree import PathTree
from util import MemoryStream


class Event(HircEntry):
    """
    ulID tid
    ulActionListSize u32 (2013, 2016) / U8x (2019+)
    ulActionID[ulActionListSize] tid
    """

    hierarchy_type = EVENT

    def __init__(self):
        super().__init__()
        self.action_ids: list[int] = []

    def read_fields(self, stream: MemoryStream, revision: str):
        if revision in (REV_2013, REV_2016):
            count = stream.uint32_read()
        else:
            count = stream.uint8_read()
        self.action_ids = stream.uint32_array(count)

    def get_children(self):
        return self.action_ids


class ActionException:

    def __init__(self, exception_id: int = 0, is_bus: int = 0):
        self.exception_id = exception_id
        self.is_bus = is_bus

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        return ActionException(stream.uint32_read(), stream.uint8_read())


def read_exceptions(stream: MemoryStream) -> list[ActionException]:
    return stream.array_read(
        stream.uint8_read(), ActionException.from_memory_stream
    )


class ActionSettings:
    """
    Type dependent tail of an EventAction.
    """

    def has_exceptions(self):
        return False


class ActiveActionSettings(ActionSettings):
    """
    Stop / Pause / Resume

    eFadeCurve U8x
    flags U8x
    exceptions (count U8x): ulID tid, bIsBus U8x
    """

    def __init__(self):
        self.fade_curve: int = 0
        self.flag: int = 0
        self.exceptions: list[ActionException] = []

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        s = ActiveActionSettings()
        s.fade_curve = stream.uint8_read()
        s.flag = stream.uint8_read()
        s.exceptions = read_exceptions(stream)
        return s

    def has_exceptions(self):
        return True


class PlayActionSettings(ActionSettings):
    """
    eFadeCurve U8x
    fileID tid (bank holding the target)
    """

    def __init__(self, fade_curve: int = 0, bank_id: int = 0):
        self.fade_curve = fade_curve
        self.bank_id = bank_id

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        return PlayActionSettings(stream.uint8_read(), stream.uint32_read())


class SeekActionSettings(ActionSettings):
    """
    eSeekType U8x
    fSeekValue f32
    fSeekValueMin u32
    fSeekValueMax u32
    bSnapToNearestMarker U8x
    """

    def __init__(self):
        self.seek_type: int = 0
        self.seek: float = 0.0
        self.unknown_0: int = 0
        self.unknown_1: int = 0
        self.snap_to_nearest_marker: bool = False

    @staticmethod
    def from_memory_stream(stream: MemoryStream):
        s = SeekActionSettings()
        s.seek_type = stream.uint8_read()
        s.seek = stream.float_read()
        s.unknown_0 = stream.uint32_read()
        s.unknown_1 = stream.uint32_read()
        s.snap_to_nearest_marker = stream.bool_read()
        return s


class OpaqueActionSettings(ActionSettings):

    def __init__(self, blob: bytes = b""):
        self.blob = blob


class EventAction(HircEntry):
    """
    ulID tid
    eHircType / ulActionType: scope U8x, action type U8x
    idExt tid
    idExt_4 U8x
    PropBundle
    RangedModifiers (not 2013)
    settings (depends on the action type)
    """

    hierarchy_type = EVENT_ACTION

    def __init__(self):
        super().__init__()
        self.scope: int = 0
        self.action_type: int = 0
        self.target_id: int = 0
        self.unknown_06: int = 0
        self.parameters = ParameterBag()
        self.parameter_pairs = ParameterPairs()
        self.unknown_08: int | None = None
        self.settings: ActionSettings | None = None

    def read_fields(self, stream: MemoryStream, revision: str):
        self.scope = stream.uint8_read()
        self.action_type = stream.uint8_read()
        self.target_id = stream.uint32_read()
        self.unknown_06 = stream.uint8_read()

        self.parameters = ParameterBag.from_memory_stream(stream, revision)

        if revision == REV_2013:
            self.unknown_08 = stream.uint8_read()
            if self.action_type == ACTION_PLAY:
                self.settings = PlayActionSettings.from_memory_stream(stream)
            else:
                self.settings = OpaqueActionSettings(stream.read())
            return

        self.parameter_pairs = ParameterPairs.from_memory_stream(stream)

        if self.action_type in (ACTION_STOP, ACTION_PAUSE, ACTION_RESUME):
            self.settings = ActiveActionSettings.from_memory_stream(stream)
        elif self.action_type == ACTION_PLAY:
            self.settings = PlayActionSettings.from_memory_stream(stream)
        elif self.action_type == ACTION_SEEK:
            self.settings = SeekActionSettings.from_memory_stream(stream)
        else:
            self.settings = None

    def get_action_name(self):
        return ActionType.get(self.action_type, f"Unknown ({self.action_type})")

    def get_children(self):
        if self.target_id == 0:
            return []
        return [self.target_id]


class DialogueEvent(HircEntry):
    """
    ulID tid
    uProbability U8x
    uTreeDepth u32, then argument ids
    3 unknown bytes
    uTreeDataSize u32
    uMode U8x
    decision tree
    """

    hierarchy_type = DIALOGUE_EVENT

    def __init__(self):
        super().__init__()
        self.probability: int = 0
        self.argument_ids: list[int] = []
        self.unknown: bytes = b""
        self.use_weighted: bool = False
        self.paths = PathTree()

    def read_fields(self, stream: MemoryStream, revision: str):
        self.probability = stream.uint8_read()
        self.argument_ids = stream.uint32_array(stream.uint32_read())
        self.unknown = stream.read(3)

        path_length = stream.uint32_read()
        self.use_weighted = stream.bool_read()
        # No terminal id set for dialogue events
        self.paths = PathTree.from_memory_stream(stream, path_length)
