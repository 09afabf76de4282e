from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str  # "customer" | "owner"

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"
