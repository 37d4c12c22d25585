"""
Read-only parent / child views over a decoded hierarchy.

Nothing here mutates a decoded object. A view only records, per object id,
the ids of its children and which ids are roots.
"""

from collections.abc import Callable, Iterator

from const import *
from hirc_entry import HircEntry
from hirc_music import MusicNode, MusicTrack
from hirc_objects import (
    ActorMixer, AudioBus, BlendContainer, Container, Sound, SwitchContainer
)
from wwise_hierarchy import WwiseHierarchy


MASTER_AUDIO_BUS_ID = 0xE2B7BC37
MASTER_SECONDARY_BUS_ID = 0x2FFE6EF7

ACTOR_TYPES = (Sound, Container, SwitchContainer, ActorMixer, BlendContainer)
MUSIC_TYPES = (MusicNode, MusicTrack)


def build_index(hierarchy: WwiseHierarchy) -> dict[int, list[int]]:
    """
    Object id -> positions of the objects carrying it in the entry list.
    """
    index: dict[int, list[int]] = {}
    for i, entry in enumerate(hierarchy.get_entries()):
        if entry.hierarchy_id == None:
            continue
        index.setdefault(entry.hierarchy_id, []).append(i)
    return index


class HierarchyView:

    def __init__(self, name: str):
        self.name = name
        self.members: list[int] = []
        self.parents: dict[int, int] = {}
        self.children: dict[int, list[int]] = {}
        self.roots: list[int] = []

    def __len__(self):
        return len(self.members)

    def __contains__(self, entry_id: int):
        return entry_id in self.parents

    def get_parent(self, entry_id: int) -> int | None:
        """
        None for roots.
        """
        parent_id = self.parents[entry_id]
        if parent_id == 0 or parent_id not in self.parents:
            return None
        return parent_id

    def get_children(self, entry_id: int) -> list[int]:
        return self.children.get(entry_id, [])

    def walk(self) -> Iterator[tuple[int, int]]:
        """
        Depth-first (depth, id) from every root. Each id is visited once.
        """
        visited: set[int] = set()
        for root in self.roots:
            stack = [(0, root)]
            while len(stack) > 0:
                depth, entry_id = stack.pop()
                if entry_id in visited:
                    continue
                visited.add(entry_id)
                yield depth, entry_id
                for child in reversed(self.get_children(entry_id)):
                    stack.append((depth + 1, child))


def build_view(
    name: str,
    entries: list[HircEntry],
    parent_of: Callable[[HircEntry], int]
) -> HierarchyView:
    view = HierarchyView(name)
    for entry in entries:
        if entry.hierarchy_id == None or entry.hierarchy_id in view.parents:
            continue
        view.members.append(entry.hierarchy_id)
        view.parents[entry.hierarchy_id] = parent_of(entry)

    for entry_id in view.members:
        parent_id = view.get_parent(entry_id)
        if parent_id == None:
            view.roots.append(entry_id)
        else:
            view.children.setdefault(parent_id, []).append(entry_id)

    return view


def master_mixer_view(hierarchy: WwiseHierarchy) -> HierarchyView:
    buses = [e for e in hierarchy.get_entries() if isinstance(e, AudioBus)]
    view = build_view("Master-Mixer Hierarchy", buses, lambda bus: bus.parent_id)
    # Master buses first
    view.roots.sort(
        key=lambda i: (i != MASTER_AUDIO_BUS_ID, i != MASTER_SECONDARY_BUS_ID)
    )
    return view


def actor_mixer_view(hierarchy: WwiseHierarchy) -> HierarchyView:
    actors = [e for e in hierarchy.get_entries() if isinstance(e, ACTOR_TYPES)]
    return build_view(
        "Actor-Mixer Hierarchy", actors, lambda a: a.properties.parent_id
    )


def music_view(hierarchy: WwiseHierarchy) -> HierarchyView:
    music = [e for e in hierarchy.get_entries() if isinstance(e, MUSIC_TYPES)]
    return build_view(
        "Interactive Music Hierarchy", music, lambda m: m.properties.parent_id
    )


def serialize_view(
    view: HierarchyView,
    hierarchy: WwiseHierarchy,
    names: dict[int, str] | None = None,
    indent: str = "  "
) -> str:
    lines = [view.name]
    for depth, entry_id in view.walk():
        label = str(entry_id)
        if names != None and entry_id in names:
            label = f"{names[entry_id]} ({entry_id})"
        if hierarchy.has_entry(entry_id):
            label = f"{hierarchy.get_entry(entry_id).get_type_name()} {label}"
        lines.append(f"{indent * (depth + 1)}{label}")
    return "\n".join(lines)
