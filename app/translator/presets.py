# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/3 17:05
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 回复风格预设与防重复的随机选择
"""
import random
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from models import ReplyPreset

RANDOM_PRESET_ID = "random"
RANDOM_PRESET_LABEL = "随机风格（每次生成变化）"

REPLY_PRESETS: List[ReplyPreset] = [
    ReplyPreset(
        id="friendly_brief",
        label="友好简短",
        instruction="Friendly and casual tone. Keep it short: 1-2 concise sentences.",
    ),
    ReplyPreset(
        id="warm_supportive",
        label="温暖支持",
        instruction="Empathetic and supportive tone. Acknowledge feelings before giving suggestion.",
    ),
    ReplyPreset(
        id="playful_light",
        label="轻松俏皮",
        instruction="Light and playful tone with mild humor. Keep it natural, not exaggerated.",
    ),
    ReplyPreset(
        id="professional_clear",
        label="专业清晰",
        instruction="Calm professional tone. Clear wording, polite, and to the point.",
    ),
    ReplyPreset(
        id="curious_followup",
        label="追问引导",
        instruction="Use a curious tone and end with one short follow-up question.",
    ),
    ReplyPreset(
        id="action_oriented",
        label="行动建议",
        instruction="Give practical next-step advice with one concrete suggestion.",
    ),
    ReplyPreset(
        id="confident_direct",
        label="自信直接",
        instruction="Direct and confident tone. No fluff, no overexplaining.",
    ),
    ReplyPreset(
        id="thoughtful_detail",
        label="细节走心",
        instruction="Thoughtful tone. Reference one concrete detail from context to avoid generic wording.",
    ),
]

FALLBACK_PRESET = ReplyPreset(
    id="fallback", label="默认", instruction="Write a natural chat reply aligned with the context."
)


class ReplyPresetSelector:
    """
    解析回复风格预设

    `random` 只是一个入口标记，永远不会作为结果返回；
    随机选择只在具体预设之间进行，并在至少有两个预设时避开上一次的选择。
    """

    def __init__(
        self,
        presets: Sequence[ReplyPreset] = REPLY_PRESETS,
        rng: random.Random | None = None,
    ):
        self._presets = [p for p in presets if p.id != RANDOM_PRESET_ID]
        self._rng = rng or random.Random()
        self.last_picked_id: Optional[str] = None

    @property
    def presets(self) -> List[ReplyPreset]:
        return list(self._presets)

    def options(self) -> List[Tuple[str, str]]:
        return [(RANDOM_PRESET_ID, RANDOM_PRESET_LABEL)] + [(p.id, p.label) for p in self._presets]

    def resolve(self, preset_id: str | None) -> ReplyPreset:
        normalized_id = str(preset_id or RANDOM_PRESET_ID).strip().lower() or RANDOM_PRESET_ID

        if normalized_id == RANDOM_PRESET_ID:
            picked = self._pick_random()
        else:
            picked = next((p for p in self._presets if p.id == normalized_id), None)
            if picked is None:
                logger.warning(f"未知的回复预设 {preset_id}，使用默认预设")
                picked = self._presets[0] if self._presets else FALLBACK_PRESET

        self.last_picked_id = picked.id
        return picked

    def _pick_random(self) -> ReplyPreset:
        candidates = self._presets
        if self.last_picked_id and len(candidates) >= 2:
            candidates = [p for p in candidates if p.id != self.last_picked_id] or candidates
        if not candidates:
            return FALLBACK_PRESET
        return self._rng.choice(candidates)
