"""Tests for contact detection and windowed peak search."""

import numpy as np


def test_detect_contact_global_max():
    from swingseq.events import detect_contact
    energy = np.exp(-0.5 * ((np.arange(100) - 40) / 5.0) ** 2)
    assert detect_contact(energy) == 40


def test_detect_contact_first_on_ties():
    from swingseq.events import detect_contact
    energy = np.zeros(60)
    energy[10] = 1.0
    energy[40] = 1.0
    assert detect_contact(energy, window=1) == 10


def test_detect_contact_empty_and_nan():
    from swingseq.events import detect_contact
    assert detect_contact(np.array([])) == 0
    energy = np.full(20, np.nan)
    energy[5] = 3.0
    assert detect_contact(energy, window=1) == 5


def test_detect_contact_prefers_later_spike():
    """Post-contact spikes win: contact is the global energy maximum."""
    from swingseq.events import detect_contact
    energy = np.zeros(200)
    energy[80] = 10.0
    energy[150] = 20.0
    assert detect_contact(energy, window=1) == 150


def test_analysis_window():
    from swingseq.events import analysis_window
    assert analysis_window(230, 300) == (80, 230)
    assert analysis_window(100, 300) == (0, 100)
    assert analysis_window(200, 250) == (75, 200)
    assert analysis_window(0, 300) == (0, 0)
    assert analysis_window(50, 100, window_ms=100) == (40, 50)


class TestFindPeakInWindow:

    def test_short_window_returns_start(self):
        from swingseq.events import find_peak_in_window
        sig = np.arange(100, dtype=float)
        assert find_peak_in_window(sig, 20, 29) == 20
        assert find_peak_in_window(sig, 5, 5) == 5

    def test_largest_local_maximum(self):
        from swingseq.events import find_peak_in_window
        sig = np.zeros(60)
        sig[15] = 0.8
        sig[30] = 1.0
        assert find_peak_in_window(sig, 0, 60) == 30

    def test_equal_peaks_first_wins(self):
        from swingseq.events import find_peak_in_window
        sig = np.zeros(60)
        sig[15] = 1.0
        sig[30] = 1.0
        assert find_peak_in_window(sig, 0, 60) == 15

    def test_local_max_preferred_over_edge_max(self):
        from swingseq.events import find_peak_in_window
        sig = np.zeros(50)
        sig[15] = 0.5
        sig[40:50] = np.linspace(0.1, 1.0, 10)
        assert find_peak_in_window(sig, 0, 50) == 15

    def test_bump_below_threshold_ignored(self):
        from swingseq.events import find_peak_in_window
        sig = np.zeros(50)
        sig[10] = 0.2
        sig[40:50] = np.linspace(0.1, 1.0, 10)
        # no qualifying local maximum: fall back to the window maximum
        assert find_peak_in_window(sig, 0, 50) == 49

    def test_monotonic_window_fallback(self):
        from swingseq.events import find_peak_in_window
        sig = np.arange(100, dtype=float)
        assert find_peak_in_window(sig, 10, 40) == 39

    def test_plateau_is_not_strict_maximum(self):
        from swingseq.events import find_peak_in_window
        sig = np.zeros(40)
        sig[10] = 0.6
        sig[20:22] = 1.0
        assert find_peak_in_window(sig, 0, 40) == 10

    def test_offset_window(self):
        from swingseq.events import find_peak_in_window
        sig = np.zeros(200)
        sig[120] = 5.0
        sig[60] = 9.0
        idx = find_peak_in_window(sig, 100, 150)
        assert idx == 120


def test_detect_segment_peaks_independent():
    from swingseq.events import detect_segment_peaks
    vel = {}
    for seg, pos in (("pelvis", 20), ("torso", 25), ("arms", 30)):
        v = np.zeros(50)
        v[pos] = 1.0
        vel[seg] = v
    peaks = detect_segment_peaks(vel, 0, 50)
    assert peaks == {"pelvis": 20, "torso": 25, "arms": 30}
