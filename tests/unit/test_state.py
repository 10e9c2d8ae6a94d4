"""Tests for the conversion state machine types."""

import pytest

from img2latex.models import ConversionResult
from img2latex.state import Converting, Idle, Settled


class TestSettled:
    def test_success_carries_result_only(self):
        result = ConversionResult(text="x^2")

        state = Settled.success(3, result)

        assert state.generation == 3
        assert state.result == result
        assert state.error is None

    def test_failure_carries_error_only(self):
        state = Settled.failure(1, "Please upload an image first")

        assert state.result is None
        assert state.error == "Please upload an image first"

    def test_result_and_error_are_exclusive(self):
        with pytest.raises(ValueError):
            Settled(generation=1, result=ConversionResult(text="x"), error="boom")

    def test_empty_settled_state_is_rejected(self):
        with pytest.raises(ValueError):
            Settled(generation=1)


class TestStateEquality:
    def test_states_compare_by_value(self):
        assert Idle() == Idle()
        assert Converting(generation=2) == Converting(generation=2)
        assert Converting(generation=2) != Converting(generation=3)


class TestConversionResult:
    def test_counts(self):
        result = ConversionResult(text="a\nbc\n")

        assert result.line_count == 3
        assert result.char_count == 5
        assert result.demo is False
