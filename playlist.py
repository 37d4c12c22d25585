from collections.abc import Iterator

from const import REV_2013, PLAYLIST_SEGMENT
from errors import MalformedContainer
from util import MemoryStream


class PlaylistItem:
    """
    SegmentID tid
    playlistItemID tid
    NumChildren u32
    eRSType u32
    Loop s16
    (LoopMin s16, LoopMax s16) absent in 2013
    Weight u32
    wAvoidRepeatCount u16
    bIsUsingWeight U8x
    bIsShuffle U8x
    """

    def __init__(self):
        self.segment_id: int = 0
        self.item_id: int = 0
        self.child_count: int = 0
        self.element_type: int = 0
        self.loop_count: int = 0
        self.loop_min: int | None = None
        self.loop_max: int | None = None
        self.weight: int = 0
        self.avoid_repeat_count: int = 0
        self.is_group: bool = False
        self.is_shuffle: bool = False
        self.children: list['PlaylistItem'] = []

    def is_segment(self):
        return self.element_type == PLAYLIST_SEGMENT

    @staticmethod
    def item_size(revision: str) -> int:
        return 26 if revision == REV_2013 else 30

    @staticmethod
    def read_item(stream: MemoryStream, revision: str):
        """
        Read the fields of one item. Children are not read.
        """
        item = PlaylistItem()

        item.segment_id = stream.uint32_read()
        item.item_id = stream.uint32_read()
        item.child_count = stream.uint32_read()
        item.element_type = stream.uint32_read()
        item.loop_count = stream.uint16_read()
        if revision != REV_2013:
            item.loop_min = stream.int16_read()
            item.loop_max = stream.int16_read()
        item.weight = stream.uint32_read()
        item.avoid_repeat_count = stream.uint16_read()
        item.is_group = stream.bool_read()
        item.is_shuffle = stream.bool_read()

        if item.child_count * PlaylistItem.item_size(revision) > stream.remaining():
            raise MalformedContainer(
                stream.base + stream.tell(),
                f"playlist item declares {item.child_count} children with "
                f"{stream.remaining()} bytes left"
            )

        return item

    @staticmethod
    def from_memory_stream(stream: MemoryStream, revision: str):
        """
        Items are stored depth first, each item followed by its children.
        """
        root = PlaylistItem.read_item(stream, revision)
        pending: list[list] = [[root, root.child_count]]
        while len(pending) > 0:
            top = pending[-1]
            if top[1] == 0:
                pending.pop()
                continue
            top[1] -= 1
            child = PlaylistItem.read_item(stream, revision)
            top[0].children.append(child)
            pending.append([child, child.child_count])

        return root

    def walk(self) -> Iterator['PlaylistItem']:
        stack = [self]
        while len(stack) > 0:
            item = stack.pop()
            yield item
            stack.extend(reversed(item.children))

    def count(self) -> int:
        return sum(1 for _ in self.walk())

    def segment_ids(self) -> list[int]:
        return [item.segment_id for item in self.walk() if item.is_segment()]
