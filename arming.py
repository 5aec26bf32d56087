# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Short-lived "arming" of the next diamond interaction.

Before clicking the diamond the scorer may pre-select which batter gets
credit for the advance (keys 1-9) or turn the click into a walk/HBP award
(``b`` / ``h``). Each armed value expires ``ARM_DURATION_S`` seconds after
it was set; ``Escape`` clears everything at once.

Expiry is a pure check against an explicit timestamp, so callers pass
``now`` in and nothing here owns a timer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from models import AwardType

ARM_DURATION_S = 3.0

T = TypeVar("T")


@dataclass(frozen=True)
class Armed(Generic[T]):
    value: T
    expires_at: float

    def is_active(self, now: float) -> bool:
        return now <= self.expires_at


@dataclass
class ArmingState:
    """Armed batter-credit and award-type values for the next interaction."""
    cause: Optional[Armed[int]] = None
    award: Optional[Armed[AwardType]] = None

    def arm_cause(self, batter_number: int, now: float) -> None:
        if not 1 <= batter_number <= 9:
            raise ValueError(f"batter number must be 1-9, got {batter_number}")
        self.cause = Armed(batter_number, now + ARM_DURATION_S)

    def arm_award(self, award: AwardType, now: float) -> None:
        self.award = Armed(AwardType(award), now + ARM_DURATION_S)

    def cancel(self) -> None:
        self.cause = None
        self.award = None

    def poll(self, now: float) -> None:
        """Drop any armed value whose window has passed."""
        if self.cause is not None and not self.cause.is_active(now):
            self.cause = None
        if self.award is not None and not self.award.is_active(now):
            self.award = None

    def active_cause(self, now: float) -> Optional[int]:
        self.poll(now)
        return self.cause.value if self.cause else None

    def active_award(self, now: float) -> Optional[AwardType]:
        self.poll(now)
        return self.award.value if self.award else None

    def consume(self, now: float) -> tuple[Optional[int], Optional[AwardType]]:
        """Return whatever is still armed and clear it in the same step."""
        cause, award = self.active_cause(now), self.active_award(now)
        self.cancel()
        return cause, award

    def handle_key(self, key: str, now: float) -> bool:
        """Apply a keyboard shortcut. Returns False for keys with no meaning here."""
        if len(key) == 1 and "1" <= key <= "9":
            self.arm_cause(int(key), now)
        elif key in ("b", "B"):
            self.arm_award(AwardType.WALK, now)
        elif key in ("h", "H"):
            self.arm_award(AwardType.HBP, now)
        elif key == "Escape":
            self.cancel()
        else:
            return False
        return True

    def to_dict(self, now: float) -> dict:
        award = self.active_award(now)
        return {
            "cause": self.active_cause(now),
            "award": award.value if award else None,
        }
