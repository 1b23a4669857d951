"""Tests for session aggregation."""

import pytest

from conftest import make_result


def test_empty_session():
    from swingseq.session import summarize_session
    s = summarize_session([])
    assert s.movement_count == 0
    assert s.dominant_profile is None
    assert s.profile_consistency == 0.0
    assert s.mean_timing_gap_ms == 0.0
    assert s.to_dict()["dominant_profile"] == "UNKNOWN"


def test_dominant_profile_and_rates():
    from swingseq.schema import MotorProfile
    from swingseq.session import summarize_session
    results = [
        make_result(movement_id="1", peak_timing_gap_ms=20),
        make_result(movement_id="2", peak_timing_gap_ms=30,
                    motor_profile=MotorProfile.WHIPPER, all_segments_decel=False),
        make_result(movement_id="3", peak_timing_gap_ms=25),
        make_result(movement_id="4", peak_timing_gap_ms=45, sequence_correct=False,
                    motor_profile=MotorProfile.SEQUENCE_ISSUE),
    ]
    s = summarize_session(results)
    assert s.movement_count == 4
    assert s.dominant_profile == MotorProfile.SPINNER
    assert s.profile_consistency == pytest.approx(0.5)
    assert s.mean_timing_gap_ms == pytest.approx(30.0)
    assert s.sequence_rate == pytest.approx(0.75)
    assert s.decel_rate == pytest.approx(0.75)


def test_tie_goes_to_first_seen_profile():
    from swingseq.schema import MotorProfile
    from swingseq.session import summarize_session
    results = [
        make_result(motor_profile=MotorProfile.WHIPPER),
        make_result(motor_profile=MotorProfile.SPINNER),
        make_result(motor_profile=MotorProfile.SPINNER),
        make_result(motor_profile=MotorProfile.WHIPPER),
    ]
    assert summarize_session(results).dominant_profile == MotorProfile.WHIPPER


def test_profile_counts_order():
    from swingseq.schema import MotorProfile
    from swingseq.session import profile_counts
    counts = profile_counts([
        make_result(motor_profile=MotorProfile.TITAN),
        make_result(motor_profile=MotorProfile.SPINNER),
        make_result(motor_profile=MotorProfile.TITAN),
    ])
    assert list(counts.items()) == [(MotorProfile.TITAN, 2), (MotorProfile.SPINNER, 1)]


def test_summary_to_dict_serializable():
    import json
    from swingseq.session import summarize_session
    d = summarize_session([make_result()]).to_dict()
    assert d["dominant_profile"] == "SPINNER"
    json.dumps(d)


def test_mean_gap_uses_magnitude():
    from swingseq.session import summarize_session
    s = summarize_session([make_result(peak_timing_gap_ms=-20), make_result(peak_timing_gap_ms=30)])
    assert s.mean_timing_gap_ms == pytest.approx(25.0)
