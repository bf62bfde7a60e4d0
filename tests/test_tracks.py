import math

import pytest

from stellar_evolution.data import MAIN_SEQUENCE, RED_GIANT, TRACK_MASSES, WHITE_DWARF
from stellar_evolution.tracks import (
    PHASE_FORMULAS,
    EvolutionTrackPoint,
    Phase,
    PhaseDurations,
    compute_track,
    phase_at,
    phase_durations,
    point_at_age,
    stage_durations,
)


class TestComputeTrack:
    """Tests for the parametric evolutionary track."""

    @pytest.mark.parametrize("mass", TRACK_MASSES)
    def test_age_grid(self, mass):
        track = compute_track(mass, 120)
        assert len(track) == 120
        assert track[0].age == pytest.approx(0.01)
        assert track[-1].age == 13000
        assert all(a.age < b.age for a, b in zip(track, track[1:]))

    def test_default_point_count(self):
        assert len(compute_track(1.0)) == 120

    def test_custom_point_count(self):
        assert len(compute_track(2.0, 30)) == 30

    @pytest.mark.parametrize("mass", TRACK_MASSES)
    def test_mass_constant(self, mass):
        assert {p.mass for p in compute_track(mass)} == {mass}

    def test_pure(self):
        assert compute_track(5.0) == compute_track(5.0)

    def test_stage_tags_follow_phase_boundaries(self):
        track = compute_track(1.0)
        for p in track:
            if p.age <= 10000:
                assert p.stage == MAIN_SEQUENCE
            elif p.age <= 11000:
                assert p.stage == RED_GIANT
            else:
                assert p.stage == WHITE_DWARF

    def test_low_mass_never_leaves_main_sequence(self):
        assert {p.stage for p in compute_track(0.5)} == {MAIN_SEQUENCE}

    def test_high_mass_reaches_white_dwarf(self):
        stages = [p.stage for p in compute_track(15.0)]
        assert stages[0] == MAIN_SEQUENCE
        assert stages[-1] == WHITE_DWARF

    def test_main_sequence_start(self):
        p = compute_track(1.0)[0]
        assert p.temperature == pytest.approx(1.1 * 5800, rel=1e-6)
        assert p.luminosity == pytest.approx(0.9, rel=1e-6)

    def test_white_dwarf_end(self):
        p = compute_track(2.0)[-1]
        assert p.stage == WHITE_DWARF
        assert p.temperature == pytest.approx(15000 * 0.3 * 2.0 ** -0.1)
        assert p.luminosity == pytest.approx(0.035)

    def test_luminosity_positive(self):
        for mass in (0.1, 0.8, 1.0, 3.0, 25.0):
            assert all(p.luminosity > 0 for p in compute_track(mass))

    @pytest.mark.parametrize("mass", [0, -1.0, float("nan"), float("inf"), "1.0", None])
    def test_invalid_mass(self, mass):
        with pytest.raises(ValueError):
            compute_track(mass)

    @pytest.mark.parametrize("mass", [1e-130, 1e-123, 5e-324])
    def test_mass_too_small_for_durations(self, mass):
        with pytest.raises(ValueError):
            compute_track(mass)
        with pytest.raises(ValueError):
            stage_durations(mass)

    @pytest.mark.parametrize("count", [0, -3, 1.5])
    def test_invalid_point_count(self, count):
        with pytest.raises(ValueError):
            compute_track(1.0, count)


class TestPhases:
    """Tests for phase durations and branch selection."""

    def test_solar_mass_durations(self):
        d = phase_durations(1.0)
        assert d.main_sequence == 10000
        assert d.red_giant == 1000
        assert d.white_dwarf == 2000

    def test_switch_points(self):
        d = phase_durations(1.0)
        assert phase_at(10000, d) is Phase.MAIN_SEQUENCE
        assert phase_at(10000.5, d) is Phase.RED_GIANT
        assert phase_at(11000, d) is Phase.RED_GIANT
        assert phase_at(11000.5, d) is Phase.WHITE_DWARF

    def test_phase_labels(self):
        assert Phase.MAIN_SEQUENCE.value == MAIN_SEQUENCE
        assert Phase.RED_GIANT.value == RED_GIANT
        assert Phase.WHITE_DWARF.value == WHITE_DWARF

    def test_every_phase_has_formula(self):
        assert set(PHASE_FORMULAS) == set(Phase)

    def test_red_giant_midpoint(self):
        d = phase_durations(1.0)
        temperature, luminosity = PHASE_FORMULAS[Phase.RED_GIANT](10500, 1.0, d)
        assert temperature == pytest.approx(5800 * 0.5)
        assert luminosity == pytest.approx(240)

    def test_white_dwarf_denominator_floor(self):
        d = PhaseDurations(main_sequence=12000, red_giant=1200, white_dwarf=-200)
        temperature, luminosity = PHASE_FORMULAS[Phase.WHITE_DWARF](13300, 1.0, d)
        assert math.isfinite(temperature)
        assert temperature == pytest.approx(15000 * 0.3)
        assert luminosity == pytest.approx(0.035)

    def test_white_dwarf_ratio_clamped(self):
        d = PhaseDurations(main_sequence=100, red_giant=10, white_dwarf=1)
        temperature, luminosity = PHASE_FORMULAS[Phase.WHITE_DWARF](5000, 1.0, d)
        assert temperature == pytest.approx(15000 * 0.3)
        assert luminosity == pytest.approx(0.035)


class TestPointAtAge:
    """Tests for the lifetime explorer lookup."""

    def test_endpoints(self):
        track = compute_track(1.0)
        assert point_at_age(track, 0) is track[0]
        assert point_at_age(track, 13000) is track[-1]

    def test_nearest(self):
        track = compute_track(1.0, 3)  # 0.01, 6500.005, 13000
        assert point_at_age(track, 6000).age == pytest.approx(6500.005)

    def test_tie_prefers_earlier(self):
        track = [EvolutionTrackPoint(age, 5800.0, 1.0, MAIN_SEQUENCE, 1.0) for age in (0.0, 10.0, 20.0)]
        assert point_at_age(track, 5.0) is track[0]

    def test_empty_track(self):
        with pytest.raises(ValueError):
            point_at_age([], 100)


class TestStageDurations:
    """Tests for the lifetime table durations."""

    def test_solar_mass(self):
        d = stage_durations(1.0)
        assert d.mass == 1.0
        assert d.pre_main == pytest.approx(15)
        assert d.main_sequence == 10000
        assert d.red_giant == 1000
        assert d.white_dwarf == 2000

    @pytest.mark.parametrize("mass", [0.1, 0.5, 0.9])
    def test_white_dwarf_floor(self, mass):
        assert stage_durations(mass).white_dwarf == 500

    @pytest.mark.parametrize("mass", TRACK_MASSES)
    def test_white_dwarf_never_below_floor(self, mass):
        assert stage_durations(mass).white_dwarf >= 500

    def test_matches_track_durations(self):
        d = phase_durations(5.0)
        s = stage_durations(5.0)
        assert (s.main_sequence, s.red_giant, s.white_dwarf) == (d.main_sequence, d.red_giant, d.white_dwarf)

    def test_invalid_mass(self):
        with pytest.raises(ValueError):
            stage_durations(-2)
