from __future__ import annotations

import logging
import random

from app.application.ports.reward_policy import RewardPolicyPort
from app.domain.entities.draft_selection import DraftSelection


class RandomRewardPolicy(RewardPolicyPort):
    def __init__(self, probability: float = 0.5, rng: random.Random | None = None) -> None:
        if not 0.0 <= probability <= 1.0:
            raise ValueError("Reward probability must be between 0 and 1")
        self._probability = probability
        self._rng = rng or random.Random()
        self._logger = logging.getLogger(__name__)

    def should_issue_reward(self, draft: DraftSelection) -> bool:
        issued = self._rng.random() < self._probability
        self._logger.debug(
            "Reward decided",
            extra={"customer_id": draft.customer_id, "station_id": draft.station_id, "reason": f"issued={issued}"},
        )
        return issued


class FixedRewardPolicy(RewardPolicyPort):
    def __init__(self, issue: bool) -> None:
        self._issue = issue

    def should_issue_reward(self, draft: DraftSelection) -> bool:
        return self._issue
