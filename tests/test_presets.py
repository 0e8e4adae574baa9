# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/5 11:48
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 回复风格预设选择测试
"""
import random

from models import ReplyPreset
from translator import RANDOM_PRESET_ID, ReplyPresetSelector
from translator.presets import FALLBACK_PRESET, REPLY_PRESETS


class TestReplyPresetSelector:
    def test_concrete_preset(self):
        selector = ReplyPresetSelector()
        assert selector.resolve("playful_light").id == "playful_light"

    def test_id_is_normalized(self):
        assert ReplyPresetSelector().resolve("  Friendly_Brief ").id == "friendly_brief"

    def test_unknown_id_falls_back_to_first_preset(self):
        assert ReplyPresetSelector().resolve("does_not_exist").id == REPLY_PRESETS[0].id

    def test_random_never_returns_marker(self):
        selector = ReplyPresetSelector(rng=random.Random(7))
        for preset_id in (RANDOM_PRESET_ID, None, "", "RANDOM"):
            picked = selector.resolve(preset_id)
            assert picked.id != RANDOM_PRESET_ID
            assert picked in REPLY_PRESETS

    def test_random_avoids_previous_pick(self):
        selector = ReplyPresetSelector(rng=random.Random(42))
        previous = selector.resolve(RANDOM_PRESET_ID).id

        for _ in range(200):
            current = selector.resolve(RANDOM_PRESET_ID).id
            assert current != previous
            previous = current

    def test_random_avoids_explicit_previous_pick(self):
        selector = ReplyPresetSelector(rng=random.Random(1))
        selector.resolve("warm_supportive")

        for _ in range(20):
            selector.last_picked_id = "warm_supportive"
            assert selector.resolve(RANDOM_PRESET_ID).id != "warm_supportive"

    def test_single_preset_is_always_returned(self):
        only = ReplyPreset(id="only", label="唯一", instruction="Be brief.")
        selector = ReplyPresetSelector([only])

        assert selector.resolve(RANDOM_PRESET_ID) == only
        assert selector.resolve(RANDOM_PRESET_ID) == only

    def test_no_presets_uses_fallback(self):
        selector = ReplyPresetSelector([])
        assert selector.resolve(RANDOM_PRESET_ID) == FALLBACK_PRESET
        assert selector.resolve("friendly_brief") == FALLBACK_PRESET

    def test_options_list_random_first(self):
        options = ReplyPresetSelector().options()
        assert options[0][0] == RANDOM_PRESET_ID
        assert [preset_id for preset_id, _ in options[1:]] == [p.id for p in REPLY_PRESETS]
