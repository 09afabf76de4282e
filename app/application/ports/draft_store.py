from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.draft_selection import DraftSelection


class DraftStorePort(ABC):
    @abstractmethod
    def get(self, customer_id: str) -> DraftSelection | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, draft: DraftSelection) -> None:
        """Store the draft for its customer, replacing any previous one."""
        raise NotImplementedError

    @abstractmethod
    def clear(self, customer_id: str) -> None:
        raise NotImplementedError
