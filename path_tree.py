"""
Association path tree used by music switch containers and dialogue events.

The section is a flat table of 12 byte records:

    owner       u32  @0   switch or state id this record matches
    ambiguous   u32  @4   either a target id, or (children start u16 @4,
                          children count u16 @6)
    weight      u16  @8
    probability u16  @10

Nothing in a record says whether it is an internal node or a leaf. A record
is a node when its (start, count) reading names a forward range that fits in
the table; every other record is a leaf whose target is the raw u32.
"""

import numpy

from collections.abc import Iterator

from errors import InvalidPathSection
from util import MemoryStream


PATH_RECORD_SIZE = 12

PATH_RECORD_DTYPE = numpy.dtype([
    ("owner", "<u4"),
    ("start", "<u2"),
    ("count", "<u2"),
    ("weight", "<u2"),
    ("probability", "<u2"),
])


class PathLeaf:

    def __init__(
        self,
        index: int,
        owner_id: int,
        target_id: int,
        weight: int,
        probability: int,
        confirmed: bool = False
    ):
        self.index = index
        self.owner_id = owner_id
        self.target_id = target_id
        self.weight = weight
        self.probability = probability
        # Target id was also found among the known terminal ids
        self.confirmed = confirmed

    def is_leaf(self):
        return True


class PathNode:

    def __init__(
        self,
        index: int,
        owner_id: int,
        children_start: int,
        children_count: int,
        weight: int,
        probability: int
    ):
        self.index = index
        self.owner_id = owner_id
        self.children_start = children_start
        self.children_count = children_count
        self.weight = weight
        self.probability = probability
        self.children: list['PathNode | PathLeaf'] = []

    def is_leaf(self):
        return False


class PathTree:

    def __init__(self):
        self.records: list[PathNode | PathLeaf] = []

    @property
    def root(self) -> PathNode | PathLeaf | None:
        if len(self.records) == 0:
            return None
        return self.records[0]

    @staticmethod
    def from_bytes(
        data: bytes | bytearray, terminal_ids: list[int] | None = None
    ) -> 'PathTree':
        if len(data) % PATH_RECORD_SIZE != 0:
            raise InvalidPathSection(len(data))

        tree = PathTree()

        table = numpy.frombuffer(bytes(data), dtype=PATH_RECORD_DTYPE)
        n = len(table)
        if n == 0:
            return tree

        index = numpy.arange(n, dtype=numpy.int64)
        start = table["start"].astype(numpy.int64)
        count = table["count"].astype(numpy.int64)
        is_node = (start < n) & (start > index) & (start + count <= n)

        ambiguous = start | (count << 16)
        if terminal_ids:
            is_terminal = numpy.isin(
                ambiguous, numpy.asarray(terminal_ids, dtype=numpy.int64)
            )
        else:
            is_terminal = numpy.zeros(n, dtype=bool)

        for i in range(n):
            record = table[i]
            if is_node[i]:
                tree.records.append(PathNode(
                    i,
                    int(record["owner"]),
                    int(record["start"]),
                    int(record["count"]),
                    int(record["weight"]),
                    int(record["probability"])
                ))
            else:
                tree.records.append(PathLeaf(
                    i,
                    int(record["owner"]),
                    int(ambiguous[i]),
                    int(record["weight"]),
                    int(record["probability"]),
                    bool(is_terminal[i])
                ))

        # Children always sit after their parent, so linking cannot cycle
        for element in tree.records:
            if isinstance(element, PathNode):
                element.children = tree.records[
                    element.children_start:element.children_start + element.children_count
                ]

        return tree

    @staticmethod
    def from_memory_stream(
        stream: MemoryStream, length: int, terminal_ids: list[int] | None = None
    ) -> 'PathTree':
        if length % PATH_RECORD_SIZE != 0:
            raise InvalidPathSection(length)
        return PathTree.from_bytes(stream.read(length), terminal_ids)

    def node_count(self) -> int:
        return sum(1 for r in self.records if isinstance(r, PathNode))

    def leaf_count(self) -> int:
        return sum(1 for r in self.records if isinstance(r, PathLeaf))

    def walk(self) -> Iterator[tuple[int, PathNode | PathLeaf]]:
        """
        Depth-first traversal from the root, yielding (depth, element).
        """
        root = self.root
        if root == None:
            return
        stack: list[tuple[int, PathNode | PathLeaf]] = [(0, root)]
        while len(stack) > 0:
            depth, top = stack.pop()
            yield depth, top
            if isinstance(top, PathNode):
                for child in reversed(top.children):
                    stack.append((depth + 1, child))

    def target_ids(self) -> list[int]:
        return [e.target_id for _, e in self.walk() if isinstance(e, PathLeaf)]
