# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for timed arming of batter credit and award type.

Validates:
  1. Armed values expire ARM_DURATION_S seconds after being set
  2. consume() returns and clears both values in one step
  3. Keyboard shortcuts 1-9, b, h and Escape
  4. Batter numbers outside 1-9 are rejected
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from arming import ARM_DURATION_S, Armed, ArmingState
from models import AwardType


class TestExpiry:
    def test_armed_active_until_expiry(self):
        armed = Armed(value=3, expires_at=10.0)
        assert armed.is_active(9.9)
        assert armed.is_active(10.0)
        assert not armed.is_active(10.01)

    def test_cause_expires_after_duration(self):
        state = ArmingState()
        state.arm_cause(4, now=100.0)
        assert state.active_cause(100.0 + ARM_DURATION_S - 0.1) == 4
        assert state.active_cause(100.0 + ARM_DURATION_S + 0.1) is None

    def test_poll_clears_expired_values(self):
        state = ArmingState()
        state.arm_cause(2, now=0.0)
        state.arm_award(AwardType.HBP, now=2.0)
        state.poll(now=ARM_DURATION_S + 1.0)
        assert state.cause is None
        assert state.award is not None

    def test_rearming_restarts_timer(self):
        state = ArmingState()
        state.arm_cause(2, now=0.0)
        state.arm_cause(5, now=2.5)
        assert state.active_cause(4.0) == 5


class TestConsume:
    def test_consume_returns_and_clears(self):
        state = ArmingState()
        state.arm_cause(7, now=0.0)
        state.arm_award(AwardType.WALK, now=0.0)
        assert state.consume(now=1.0) == (7, AwardType.WALK)
        assert state.consume(now=1.0) == (None, None)

    def test_consume_expired(self):
        state = ArmingState()
        state.arm_cause(7, now=0.0)
        assert state.consume(now=10.0) == (None, None)
        assert state.cause is None


class TestKeys:
    @pytest.mark.parametrize("key,expected", [("1", 1), ("5", 5), ("9", 9)])
    def test_digit_arms_cause(self, key, expected):
        state = ArmingState()
        assert state.handle_key(key, now=0.0) is True
        assert state.active_cause(0.0) == expected

    def test_b_and_h_arm_awards(self):
        state = ArmingState()
        state.handle_key("b", now=0.0)
        assert state.active_award(0.0) == AwardType.WALK
        state.handle_key("H", now=0.0)
        assert state.active_award(0.0) == AwardType.HBP

    def test_escape_cancels(self):
        state = ArmingState()
        state.handle_key("3", now=0.0)
        state.handle_key("b", now=0.0)
        state.handle_key("Escape", now=0.5)
        assert state.to_dict(0.5) == {"cause": None, "award": None}

    def test_unknown_keys_ignored(self):
        state = ArmingState()
        assert state.handle_key("0", now=0.0) is False
        assert state.handle_key("x", now=0.0) is False
        assert state.handle_key("12", now=0.0) is False
        assert state.cause is None

    def test_to_dict(self):
        state = ArmingState()
        state.handle_key("6", now=0.0)
        state.handle_key("h", now=0.0)
        assert state.to_dict(1.0) == {"cause": 6, "award": "HBP"}


class TestValidation:
    @pytest.mark.parametrize("n", [0, 10, -1])
    def test_out_of_range_batter(self, n):
        with pytest.raises(ValueError):
            ArmingState().arm_cause(n, now=0.0)
