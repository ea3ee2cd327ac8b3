"""
Tests for status byte event detection.

QRS and breath groups are edge-triggered, alarms level-triggered, and the
first status byte only primes the detector.
"""

import pytest

from dinamap.analysis.status_detector import (
    DetectorPhase,
    DetectorState,
    StatusEventDetector,
)

pytestmark = pytest.mark.business_logic


@pytest.fixture
def detector():
    return StatusEventDetector()


class TestFirstObservation:
    @pytest.mark.parametrize("status", [0x00, 0x06, 0x18, 0x20, 0x40, 0x7E, 0xFF])
    def test_first_status_emits_nothing(self, detector, status):
        events = detector.observe(status)

        assert not events.any
        assert detector.state == DetectorState(DetectorPhase.TRACKING, status)

    def test_starts_uninitialized(self, detector):
        assert detector.state.phase == DetectorPhase.UNINITIALIZED
        assert detector.state.previous_status is None

    def test_reset_returns_to_uninitialized(self, detector):
        detector.observe(0x00)
        detector.reset()

        assert not detector.observe(0x06).any


class TestEdgeTriggeredGroups:
    @pytest.mark.parametrize("status", [0x02, 0x04, 0x06])
    def test_any_qrs_change_counts_once(self, detector, status):
        detector.observe(0x00)
        events = detector.observe(status)

        assert events.qrs is True
        assert events.breath is False

    @pytest.mark.parametrize("status", [0x08, 0x10, 0x18])
    def test_any_breath_change_counts_once(self, detector, status):
        detector.observe(0x00)
        events = detector.observe(status)

        assert events.breath is True
        assert events.qrs is False

    def test_both_groups_change(self, detector):
        detector.observe(0x00)
        events = detector.observe(0x1E)

        assert events.qrs and events.breath

    def test_unchanged_groups_emit_nothing(self, detector):
        detector.observe(0x16)
        events = detector.observe(0x16 | 0x01 | 0x80)

        assert not events.any

    def test_compares_with_immediately_preceding_status(self, detector):
        detector.observe(0x00)
        assert detector.observe(0x02).qrs
        assert not detector.observe(0x02).qrs
        assert detector.observe(0x00).qrs


class TestLevelTriggeredAlarms:
    def test_warning_alarm_every_block(self, detector):
        detector.observe(0x20)
        results = [detector.observe(0x20) for _ in range(5)]

        assert all(e.warning_alarm for e in results)
        assert not any(e.crisis_alarm for e in results)

    def test_crisis_alarm(self, detector):
        detector.observe(0x00)
        events = detector.observe(0x40)

        assert events.crisis_alarm is True
        assert events.warning_alarm is False

    def test_both_alarms(self, detector):
        detector.observe(0x00)
        events = detector.observe(0x60)

        assert events.warning_alarm and events.crisis_alarm
        assert not events.qrs and not events.breath

    def test_alarm_clear(self, detector):
        detector.observe(0x20)
        assert not detector.observe(0x00).warning_alarm
