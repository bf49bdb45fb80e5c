"""Tests for lesson pricing — effective rate and duration-scaled prices."""

from lessonbook.core.pricing import effective_rate, price_for_duration


def test_custom_rate_wins():
    assert effective_rate(42.5, 30.0) == 42.5


def test_default_rate_when_no_custom_rate():
    assert effective_rate(None, 30.0) == 30.0


def test_zero_custom_rate_is_respected():
    assert effective_rate(0.0, 30.0) == 0.0


def test_price_scales_with_duration():
    assert price_for_duration(60, 40.0) == 40.0
    assert price_for_duration(30, 40.0) == 20.0
    assert price_for_duration(45, 33.0) == 24.75
