from abc import ABC, abstractmethod

from app.domain.entities.draft_selection import DraftSelection


class RewardPolicyPort(ABC):
    @abstractmethod
    def should_issue_reward(self, draft: DraftSelection) -> bool:
        """Decide once, at confirmation time, whether the booking carries a reward."""
        raise NotImplementedError
