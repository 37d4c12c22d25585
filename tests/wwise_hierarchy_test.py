import unittest

from const import *
from errors import LengthMismatch, MalformedContainer, UnsupportedRevision, UnknownObjectKind
from hirc_entry import UnknownEntry
from hirc_events import Event
from hirc_music import MusicPlaylistContainer
from hirc_objects import ActorMixer
from tests.fixtures import *
from wwise_hierarchy import HircEntryFactory, WwiseHierarchy, frame_records


def sample_payload(revision: str = REV_2016) -> bytes:
    return hirc_payload(
        hirc_object(ACTOR_MIXER, 0x100, actor_mixer_body(revision, children=[0x101])),
        hirc_object(ACTOR_MIXER, 0x101, actor_mixer_body(revision, parent_id=0x100)),
        hirc_object(EVENT, 0x200, event_body(revision, [0x300])),
        hirc_object(EVENT_ACTION, 0x300, event_action_head(ACTION_PLAY, 0x101)
                    + parameter_pairs() + u8(4) + u32(0)),
    )


class TestFraming(unittest.TestCase):

    def test_records(self):
        payload = sample_payload()
        records = frame_records(payload)
        self.assertEqual([r.kind for r in records],
                         [ACTOR_MIXER, ACTOR_MIXER, EVENT, EVENT_ACTION])
        self.assertEqual(records[0].offset, 4)
        self.assertEqual(records[1].offset, 4 + 5 + len(records[0].data))
        self.assertEqual(int.from_bytes(records[2].data[:4], "little"), 0x200)

    def test_object_past_end_is_fatal(self):
        payload = sample_payload()[:-2]
        with self.assertRaises(MalformedContainer):
            frame_records(payload)
        with self.assertRaises(MalformedContainer):
            WwiseHierarchy.from_bytes(payload)

    def test_fewer_objects_than_declared(self):
        payload = u32(2) + hirc_object(EVENT, 1, event_body(REV_2016, []))
        with self.assertRaises(MalformedContainer):
            frame_records(payload)

    def test_empty_payload(self):
        hierarchy = WwiseHierarchy.from_bytes(u32(0))
        self.assertEqual(len(hierarchy), 0)
        self.assertEqual(hierarchy.diagnostics, [])


class TestHircEntryFactory(unittest.TestCase):

    def test_decoder_lookup(self):
        self.assertIs(HircEntryFactory.decoder_for(ACTOR_MIXER, REV_2016), ActorMixer)
        self.assertTrue(HircEntryFactory.is_supported(MUSIC_TRACK, REV_2013))
        self.assertFalse(HircEntryFactory.is_supported(SOUND, REV_2023))
        self.assertFalse(HircEntryFactory.is_supported(ATTENUATION, REV_2016))
        with self.assertRaises(UnknownObjectKind):
            HircEntryFactory.decoder_for(ATTENUATION, REV_2016)
        with self.assertRaises(UnsupportedRevision):
            HircEntryFactory.decoder_for(SOUND, REV_2019)

    def test_events_and_music_in_every_revision(self):
        for kind in (EVENT, EVENT_ACTION, MUSIC_SEGMENT, MUSIC_TRACK,
                     MUSIC_SWITCH_CONTAINER, MUSIC_PLAYLIST_CONTAINER):
            for revision in REVISIONS:
                self.assertTrue(HircEntryFactory.is_supported(kind, revision))


class TestWwiseHierarchy(unittest.TestCase):

    def test_decode_order_and_lookup(self):
        hierarchy = WwiseHierarchy.from_bytes(sample_payload())
        self.assertEqual(len(hierarchy), 4)
        self.assertEqual([e.hierarchy_id for e in hierarchy.get_entries()],
                         [0x100, 0x101, 0x200, 0x300])
        self.assertEqual(hierarchy.decoded_count(), 4)
        self.assertEqual(hierarchy.fallback_count(), 0)
        self.assertIsInstance(hierarchy.get_entry(0x200), Event)
        self.assertEqual(len(hierarchy.get_actor_mixers()), 2)
        self.assertEqual(hierarchy.get_events()[0].action_ids, [0x300])
        self.assertEqual(hierarchy.get_event_actions()[0].target_id, 0x101)
        self.assertEqual(hierarchy.get_type(SOUND), [])
        self.assertEqual(hierarchy.kind_counts(),
                         {EVENT_ACTION: 1, EVENT: 1, ACTOR_MIXER: 2})

    def test_single_actor_mixer(self):
        payload = hirc_payload(hirc_object(ACTOR_MIXER, 0x100, actor_mixer_body(REV_2016)))
        hierarchy = WwiseHierarchy.from_bytes(payload)
        self.assertEqual(len(hierarchy), 1)
        mixer = hierarchy.get_entries()[0]
        self.assertIsInstance(mixer, ActorMixer)
        self.assertEqual(mixer.hierarchy_type, ACTOR_MIXER)
        self.assertEqual(mixer.children, [])

    def test_unknown_kind_is_kept_opaque(self):
        blob = b"\x01\x02\x03\x04\x05"
        payload = hirc_payload(
            hirc_object(ATTENUATION, 0x900, blob),
            hirc_object(0x7F, 0x901, b""),
        )
        hierarchy = WwiseHierarchy.from_bytes(payload)

        first, second = hierarchy.get_entries()
        self.assertIsInstance(first, UnknownEntry)
        self.assertEqual(first.hierarchy_id, 0x900)
        self.assertEqual(first.hierarchy_type, ATTENUATION)
        self.assertEqual(first.blob, blob)
        self.assertEqual(second.hierarchy_type, 0x7F)
        self.assertEqual(second.blob, b"")
        self.assertEqual([d.reason for d in hierarchy.diagnostics],
                         ["unknown kind", "unknown kind"])
        self.assertTrue(hierarchy.has_entry(0x901))

    def test_unsupported_revision_is_kept_opaque(self):
        payload = hirc_payload(
            hirc_object(SOUND, 0x10, sound_body(REV_2016)),
            hirc_object(EVENT, 0x11, event_body(REV_2019, [0x12])),
        )
        hierarchy = WwiseHierarchy.from_bytes(payload, REV_2019)
        sound, event = hierarchy.get_entries()
        self.assertTrue(sound.is_fallback())
        self.assertIsInstance(sound.error, UnsupportedRevision)
        self.assertEqual(hierarchy.diagnostics[0].reason, "UnsupportedRevision")
        self.assertEqual(event.action_ids, [0x12])

    def test_corrupted_object_does_not_affect_siblings(self):
        payload = hirc_payload(
            hirc_object(ACTOR_MIXER, 0x100, actor_mixer_body(REV_2016)),
            hirc_object(ACTOR_MIXER, 0x101, actor_mixer_body(REV_2016) + b"\xFF"),
            hirc_object(EVENT, 0x102, event_body(REV_2016, [1])),
        )
        hierarchy = WwiseHierarchy.from_bytes(payload)

        self.assertEqual(len(hierarchy), 3)
        self.assertEqual(hierarchy.fallback_count(), 1)
        broken = hierarchy.get_entry(0x101)
        self.assertTrue(broken.is_fallback())
        self.assertEqual(broken.blob, actor_mixer_body(REV_2016) + b"\xFF")

        diagnostic = hierarchy.diagnostics[0]
        self.assertIsInstance(diagnostic.error, LengthMismatch)
        self.assertEqual(diagnostic.error.expected, diagnostic.error.received + 1)
        self.assertEqual(diagnostic.hierarchy_id, 0x101)
        self.assertIn("Actor-Mixer 257", str(diagnostic))

        self.assertFalse(hierarchy.get_entry(0x100).is_fallback())
        self.assertEqual(hierarchy.get_entry(0x102).action_ids, [1])

    def test_deep_playlist_keeps_siblings(self):
        depth = 5000
        chain = playlist_item(REV_2016, 0, PLAYLIST_SEQUENCE_STEP, [b""]) * depth
        chain += playlist_item(REV_2016, 0x600, PLAYLIST_SEGMENT)
        body = music_prefix(REV_2016) + u32(0) + u32(depth + 1) + chain
        payload = hirc_payload(
            hirc_object(MUSIC_PLAYLIST_CONTAINER, 0x500, body),
            hirc_object(EVENT, 0x501, event_body(REV_2016, [7])),
        )
        hierarchy = WwiseHierarchy.from_bytes(payload)

        self.assertEqual(hierarchy.fallback_count(), 0)
        container = hierarchy.get_entry(0x500)
        self.assertIsInstance(container, MusicPlaylistContainer)
        self.assertEqual(container.playlist.count(), depth + 1)
        self.assertEqual(container.playlist.segment_ids(), [0x600])
        self.assertEqual(hierarchy.get_entry(0x501).action_ids, [7])

    def test_oversized_playlist_keeps_siblings(self):
        item = playlist_item(REV_2016, 0, PLAYLIST_SEQUENCE_STEP)
        # Child count patched to a value the blob cannot hold
        item = item[:8] + u32(0x7FFFFFFF) + item[12:]
        body = music_prefix(REV_2016) + u32(0) + u32(1) + item
        payload = hirc_payload(
            hirc_object(MUSIC_PLAYLIST_CONTAINER, 0x500, body),
            hirc_object(EVENT, 0x501, event_body(REV_2016, [7])),
        )
        hierarchy = WwiseHierarchy.from_bytes(payload)

        self.assertTrue(hierarchy.get_entry(0x500).is_fallback())
        self.assertIsInstance(hierarchy.diagnostics[0].error, MalformedContainer)
        self.assertEqual(hierarchy.get_entry(0x501).action_ids, [7])

    def test_strict_raises(self):
        payload = hirc_payload(
            hirc_object(ACTOR_MIXER, 0x101, actor_mixer_body(REV_2016) + b"\xFF"),
        )
        with self.assertRaises(LengthMismatch):
            WwiseHierarchy.from_bytes(payload, strict=True)

    def test_strict_keeps_unknown_kinds(self):
        payload = hirc_payload(hirc_object(EFFECT, 0x1, b"\x00"))
        hierarchy = WwiseHierarchy.from_bytes(payload, strict=True)
        self.assertEqual(hierarchy.fallback_count(), 1)

    def test_thread_pool_keeps_order(self):
        serial = WwiseHierarchy.from_bytes(sample_payload())
        pooled = WwiseHierarchy.from_bytes(sample_payload(), workers=4)
        self.assertEqual(
            [(e.hierarchy_type, e.hierarchy_id) for e in serial.get_entries()],
            [(e.hierarchy_type, e.hierarchy_id) for e in pooled.get_entries()]
        )
        self.assertEqual(pooled.get_entry(0x100).children, [0x101])

    def test_without_decoding(self):
        hierarchy = WwiseHierarchy()
        hierarchy.load(sample_payload(), decode=False)
        self.assertEqual(hierarchy.fallback_count(), 4)
        self.assertEqual(hierarchy.diagnostics, [])
        self.assertEqual(hierarchy.get_entry(0x200).hierarchy_type, EVENT)

    def test_duplicate_id_keeps_first(self):
        payload = hirc_payload(
            hirc_object(EVENT, 0x10, event_body(REV_2016, [1])),
            hirc_object(EVENT, 0x10, event_body(REV_2016, [2])),
        )
        hierarchy = WwiseHierarchy.from_bytes(payload)
        self.assertEqual(len(hierarchy), 2)
        self.assertEqual(hierarchy.get_entry(0x10).action_ids, [1])

    def test_unknown_revision(self):
        with self.assertRaises(ValueError):
            WwiseHierarchy.from_bytes(u32(0), "1999")


if __name__ == "__main__":
    unittest.main()
