import unittest

from const import *
from errors import LengthMismatch, MalformedContainer
from hirc_objects import (
    ActorMixer, AudioBus, AuxiliaryBus, BlendContainer, Container, Settings,
    Sound, SwitchContainer
)
from tests.fixtures import *


class TestActorMixerHierarchy(unittest.TestCase):

    def test_actor_mixer_without_children(self):
        blob = object_blob(0x1000, actor_mixer_body(REV_2016, parent_id=0x10))
        mixer = ActorMixer.from_bytes(blob, REV_2016)
        self.assertEqual(mixer.hierarchy_id, 0x1000)
        self.assertEqual(mixer.size, len(blob))
        self.assertEqual(mixer.get_parent_id(), 0x10)
        self.assertEqual(mixer.children, [])
        self.assertEqual(mixer.get_children(), [])
        self.assertEqual(mixer.get_type_name(), "Actor-Mixer")

    def test_actor_mixer_children(self):
        blob = object_blob(0x1000, actor_mixer_body(REV_2016, children=[3, 1, 2]))
        mixer = ActorMixer.from_bytes(blob, REV_2016)
        self.assertEqual(mixer.children, [3, 1, 2])

    def test_trailing_bytes_are_length_mismatch(self):
        blob = object_blob(0x1000, actor_mixer_body(REV_2016) + b"\x00\x00")
        with self.assertRaises(LengthMismatch) as ctx:
            ActorMixer.from_bytes(blob, REV_2016)
        self.assertEqual(ctx.exception.expected, len(blob))
        self.assertEqual(ctx.exception.received, len(blob) - 2)

    def test_short_blob_is_malformed(self):
        blob = object_blob(0x1000, actor_mixer_body(REV_2016))[:-3]
        with self.assertRaises(MalformedContainer) as ctx:
            ActorMixer.from_bytes(blob, REV_2016, offset=40)
        # Offsets are reported relative to the HIRC payload
        self.assertGreaterEqual(ctx.exception.offset, 45)

    def test_settings(self):
        blob = object_blob(0x77, parameter_bag([(PARAM_VOICE_VOLUME, "f", -6.0)]))
        settings = Settings.from_bytes(blob, REV_2016)
        self.assertEqual(settings.parameters.items(), [(PARAM_VOICE_VOLUME, -6.0)])

    def test_sound(self):
        blob = object_blob(0x2000, sound_body(REV_2016, parent_id=0x1000, audio_id=0xABC))
        sound = Sound.from_bytes(blob, REV_2016)
        self.assertEqual(sound.source, SOURCE_EMBEDDED)
        self.assertEqual(sound.audio_id, 0xABC)
        self.assertEqual(sound.audio_length, 1024)
        self.assertEqual(sound.get_parent_id(), 0x1000)

    def test_sound_with_unrecognized_source_layout(self):
        body = u8(2) + u8(0) + b"\x11" * 16 + audio_properties(REV_2016)
        sound = Sound.from_bytes(object_blob(0x2001, body), REV_2016)
        self.assertEqual(sound.opaque_source, b"\x11" * 16)
        self.assertEqual(sound.audio_id, 0)

    def test_random_container(self):
        body = audio_properties(REV_2016, parent_id=0x1000)
        body += u16(0) + u32(0) + f32(1.5) + f32(0.0) + f32(0.0)
        body += u16(2) + u8(0) + u8(1) + u8(1) + u8(0)
        body += u32_list([0x10, 0x11])
        body += u16(1) + u32(0x10) + u32(0x20)
        container = Container.from_bytes(object_blob(0x3000, body), REV_2016)
        self.assertEqual(container.children, [0x10, 0x11])
        self.assertEqual(container.transition_duration, 1.5)
        self.assertEqual(container.avoid_last_played_count, 2)
        self.assertTrue(container.shuffle)
        self.assertEqual(container.unknown_parameters[0].parameter, 0x20)

    def test_switch_container(self):
        body = audio_properties(REV_2016)
        body += u8(0) + u32(0x500) + u32(0x501) + u8(1)
        body += u32_list([0x10, 0x11])
        body += u32(2) + u32(0x501) + u32_list([0x10]) + u32(0x502) + u32_list([0x11])
        body += u32(1) + u32(0x10) + u8(0) + u8(0) + u32(100) + u32(200)
        switch = SwitchContainer.from_bytes(object_blob(0x4000, body), REV_2016)
        self.assertEqual(switch.group_id, 0x500)
        self.assertEqual(switch.default_switch_id, 0x501)
        self.assertEqual(
            [(a.switch_id, a.children) for a in switch.assignments],
            [(0x501, [0x10]), (0x502, [0x11])]
        )
        self.assertEqual(switch.child_behaviors[0].fade_in, 200)

    def test_blend_container(self):
        body = audio_properties(REV_2016)
        body += u32_list([0x10])
        body += u32(1)
        body += u32(0x900) + u16(1)
        body += u32(0) + u8(0) + u8(0) + u8(0) + u32(0x901) + u8(0)
        body += u16(2) + f32(0.0) + f32(1.0) + u32(4) + f32(1.0) + f32(0.0) + u32(4)
        body += u32(0x902) + u8(0)
        body += u32(1) + u32(0x10) + u32(1) + f32(0.0) + f32(1.0) + u32(9)
        blend = BlendContainer.from_bytes(object_blob(0x5000, body), REV_2016)
        self.assertEqual(blend.children, [0x10])
        track = blend.tracks[0]
        self.assertEqual(track.track_id, 0x900)
        self.assertEqual([(p.x, p.y) for p in track.rules[0].points], [(0.0, 1.0), (1.0, 0.0)])
        self.assertEqual(track.children[0].child_id, 0x10)
        self.assertEqual(track.children[0].crossfade_points[0].shape, 9)


class TestMasterMixerHierarchy(unittest.TestCase):

    def test_bus_without_effects(self):
        groups = state_groups(REV_2016, [(0x60, [(0x61, 0x62)])])
        curves = rtpcs(REV_2016, [rtpc(REV_2016, 0x70, 0, 0x71, [(0.0, 1.0, 4)])])
        body = audio_bus_body(REV_2016, parent_id=0x10, groups=groups, curves=curves)
        bus = AudioBus.from_bytes(object_blob(0x50, body), REV_2016)

        self.assertEqual(bus.get_parent_id(), 0x10)
        self.assertEqual(bus.bypassed_effects, None)
        self.assertEqual(bus.effects, [])
        self.assertEqual(bus.reserved, b"\x00" * 6)
        self.assertEqual(bus.instance_limit, 4)
        self.assertEqual(bus.ducking_recovery_time, 500)
        self.assertEqual([r.rtpc_id for r in bus.rtpcs], [0x70])
        self.assertEqual(bus.state_groups[0].states[0].settings_id, 0x62)

    def test_bus_with_effects_and_ducks(self):
        effects = u8(1) + u8(0x01) + u8(0) + u32(0x80) + u8(0) + u8(0)
        ducks = [ducked_bus(0x90), ducked_bus(0x91, -12.0)]
        body = audio_bus_body(REV_2016, effects=effects, ducks=ducks)
        bus = AudioBus.from_bytes(object_blob(0x51, body), REV_2016)

        self.assertEqual(bus.bypassed_effects, 0x01)
        self.assertEqual([e.effect_id for e in bus.effects], [0x80])
        self.assertEqual([d.bus_id for d in bus.ducked_buses], [0x90, 0x91])
        self.assertEqual(bus.ducked_buses[1].volume, -12.0)
        self.assertEqual(bus.ducked_buses[0].fade_in, 200)

    def test_auxiliary_bus(self):
        body = audio_bus_body(REV_2016, parent_id=0x50)
        bus = AuxiliaryBus.from_bytes(object_blob(0x52, body), REV_2016)
        self.assertEqual(bus.hierarchy_type, AUXILIARY_BUS)
        self.assertEqual(bus.get_type_name(), "Auxiliary Bus")
        self.assertEqual(bus.get_parent_id(), 0x50)


if __name__ == "__main__":
    unittest.main()
