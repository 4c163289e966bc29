"""Tests for the synthetic ground-motion and test-signal generators."""

import numpy as np
import pytest

from gmproc import (
    InvalidParameterError,
    generate_realistic_waveform,
    generate_shape_waveform,
    generate_synthetic_ground_motion,
    generate_three_component_waveform,
    generate_vertical_component,
)
from gmproc.synthetic import MAX_NOISE_DT, SITE_AMPLIFICATION, SOIL_AMPLIFICATION


def _target_pga(magnitude, distance, site_class):
    pga_rock = np.exp(0.48 * magnitude - 0.0059 * magnitude ** 2 - 0.8 * np.log10(distance + 10))
    return pga_rock * SITE_AMPLIFICATION[site_class]


class TestSyntheticGroundMotion:

    def test_peak_equals_target_pga(self):
        w = generate_synthetic_ground_motion(6.5, 20, "C", 30, 0.01, seed=1)
        assert w.peak_amplitude == pytest.approx(_target_pga(6.5, 20, "C"), rel=1e-12)
        assert w.metadata.extra["target_pga"] == pytest.approx(_target_pga(6.5, 20, "C"))

    def test_sampling(self):
        w = generate_synthetic_ground_motion(6.0, 10, "B", duration=5.0, dt=0.005, seed=0)
        assert w.npts == int(np.ceil(5.0 / 0.005))
        assert w.time[0] == 0.0
        assert w.dt == pytest.approx(0.005)
        # envelope starts at zero
        assert w.amplitude[0] == 0.0

    def test_metadata(self):
        w = generate_synthetic_ground_motion(7.0, 35.0, "D", duration=10.0, seed=3)
        md = w.metadata
        assert md.units == "g"
        assert md.source == "synthetic"
        assert md.magnitude == 7.0
        assert md.distance == 35.0
        assert md.sample_rate == pytest.approx(100.0)
        extra = md.extra
        assert extra["site_class"] == "D"
        assert extra["site_factor"] == 2.0
        assert extra["pga_rock"] * 2.0 == pytest.approx(extra["target_pga"])
        assert extra["significant_duration"] == pytest.approx(5 + 3 * 2.0 + 0.05 * 35.0)
        assert extra["corner_frequency"] == pytest.approx(4.9e6 * 10 ** -7.0)
        assert extra["duration"] == 10.0
        assert extra["dt"] == 0.01

    def test_seed_reproducibility(self):
        a = generate_synthetic_ground_motion(5.5, 5, "A", duration=8.0, seed=42)
        b = generate_synthetic_ground_motion(5.5, 5, "A", duration=8.0, seed=42)
        c = generate_synthetic_ground_motion(5.5, 5, "A", duration=8.0, seed=43)
        np.testing.assert_array_equal(a.amplitude, b.amplitude)
        assert not np.array_equal(a.amplitude, c.amplitude)

    @pytest.mark.parametrize("site_class", sorted(SITE_AMPLIFICATION))
    def test_site_classes(self, site_class):
        w = generate_synthetic_ground_motion(6.0, 15, site_class, duration=6.0, seed=7)
        assert w.peak_amplitude == pytest.approx(_target_pga(6.0, 15, site_class))

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            (dict(magnitude=3.9, distance=10, site_class="B"), "Magnitude"),
            (dict(magnitude=9.1, distance=10, site_class="B"), "Magnitude"),
            (dict(magnitude=6.0, distance=-1, site_class="B"), "Distance"),
            (dict(magnitude=6.0, distance=10, site_class="F"), "Site class"),
            (dict(magnitude=6.0, distance=10, site_class="b"), "Site class"),
            (dict(magnitude=6.0, distance=10, site_class="B", duration=0.0), "positive"),
            (dict(magnitude=6.0, distance=10, site_class="B", dt=-0.01), "positive"),
            (dict(magnitude=6.0, distance=10, site_class="B", duration=0.01, dt=0.01), "two samples"),
        ],
    )
    def test_validation(self, kwargs, match):
        with pytest.raises(InvalidParameterError, match=match):
            generate_synthetic_ground_motion(**kwargs)

    @pytest.mark.parametrize("dt", [MAX_NOISE_DT, 0.025, 0.05])
    def test_time_step_must_resolve_noise_band(self, dt):
        with pytest.raises(InvalidParameterError, match="dt must be below 0.02"):
            generate_synthetic_ground_motion(6.0, 10, "B", duration=5.0, dt=dt)

    def test_time_step_just_below_limit(self):
        w = generate_synthetic_ground_motion(6.0, 10, "B", duration=5.0, dt=0.019, seed=0)
        assert w.peak_amplitude == pytest.approx(_target_pga(6.0, 10, "B"))

    def test_magnitude_bounds_inclusive(self):
        generate_synthetic_ground_motion(4.0, 0.0, "E", duration=3.0, seed=0)
        generate_synthetic_ground_motion(9.0, 0.0, "E", duration=3.0, seed=0)


class TestShapeWaveform:

    def test_sinusoidal(self):
        w = generate_shape_waveform("sinusoidal", duration=2.0, sample_rate=50.0, frequency=2.0, amplitude=0.5)
        assert w.npts == 100
        np.testing.assert_allclose(w.amplitude, 0.5 * np.sin(2 * np.pi * 2.0 * w.time), atol=1e-12)
        assert w.units == "g"

    def test_ricker_peak_at_delay(self):
        w = generate_shape_waveform("ricker", duration=4.0, sample_rate=100.0, frequency=2.0, delay=1.0)
        assert w.time[np.argmax(w.amplitude)] == pytest.approx(1.0)
        assert w.amplitude.max() == pytest.approx(1.0)

    def test_zero_before_delay(self):
        w = generate_shape_waveform("step", duration=2.0, sample_rate=10.0, delay=0.5)
        np.testing.assert_array_equal(w.amplitude[w.time < 0.5], 0.0)
        np.testing.assert_array_equal(w.amplitude[w.time >= 0.5], 1.0)

    def test_pulse(self):
        w = generate_shape_waveform("pulse", duration=3.0, sample_rate=10.0, pulse_duration=1.0, amplitude=2.0)
        np.testing.assert_array_equal(w.amplitude[:10], 2.0)
        np.testing.assert_array_equal(w.amplitude[10:], 0.0)

    def test_noise_is_seeded_and_bounded(self):
        a = generate_shape_waveform("noise", seed=5)
        b = generate_shape_waveform("noise", seed=5)
        np.testing.assert_array_equal(a.amplitude, b.amplitude)
        assert np.all(np.abs(a.amplitude) <= 1.0)

    def test_unknown_shape(self):
        with pytest.raises(InvalidParameterError, match="Unknown shape"):
            generate_shape_waveform("triangle")

    def test_too_short(self):
        with pytest.raises(InvalidParameterError):
            generate_shape_waveform("step", duration=0.01, sample_rate=100.0)

    def test_custom_function(self):
        w = generate_shape_waveform("custom", duration=2.0, sample_rate=10.0, amplitude=3.0, delay=1.0,
                                    function=lambda tau: tau ** 2)
        np.testing.assert_array_equal(w.amplitude[:10], 0.0)
        np.testing.assert_allclose(w.amplitude[10:], 3.0 * (w.time[10:] - 1.0) ** 2)
        assert w.metadata.source == "shape:custom"

    def test_custom_scalar_function_broadcasts(self):
        w = generate_shape_waveform("custom", duration=1.0, sample_rate=10.0, function=lambda tau: 0.5)
        np.testing.assert_array_equal(w.amplitude, 0.5)

    def test_custom_needs_function(self):
        with pytest.raises(InvalidParameterError, match="callable"):
            generate_shape_waveform("custom")

    def test_custom_wrong_length(self):
        with pytest.raises(InvalidParameterError, match="numeric values"):
            generate_shape_waveform("custom", function=lambda tau: np.ones(3))


def _expected_pga(magnitude, distance, soil_type):
    return np.exp(magnitude - 0.05 * np.log(distance + 10) - 3.5) * SOIL_AMPLIFICATION[soil_type]


class TestRealisticWaveform:

    def test_default_target_and_sampling(self):
        w = generate_realistic_waveform(duration=10.0, seed=1)
        assert w.npts == 1000
        assert w.dt == pytest.approx(0.01)
        assert w.peak_amplitude == pytest.approx(0.3)
        # quadratic build-up starts from zero
        assert w.amplitude[0] == 0.0

    def test_metadata(self):
        w = generate_realistic_waveform(duration=5.0, magnitude=7.0, distance=40.0, depth=15.0,
                                        soil_type="soft", component="N-S", seed=2)
        md = w.metadata
        assert md.units == "g"
        assert md.component == "N-S"
        assert (md.magnitude, md.distance, md.depth) == (7.0, 40.0, 15.0)
        assert md.source == "synthetic:realistic"
        assert md.extra["soil_factor"] == 1.5
        assert md.extra["corner_frequency"] == pytest.approx(4.0 * np.exp(-3.5) + 0.2)
        assert md.extra["high_frequency_decay"] == pytest.approx(1.8)
        assert md.extra["expected_pga"] == pytest.approx(_expected_pga(7.0, 40.0, "soft"))

    def test_empirical_target_when_peak_not_given(self):
        w = generate_realistic_waveform(duration=5.0, magnitude=4.0, distance=50.0, soil_type="rock",
                                        peak_acceleration=None, seed=3)
        assert w.peak_amplitude == pytest.approx(_expected_pga(4.0, 50.0, "rock"))
        assert w.metadata.extra["target_pga"] == pytest.approx(w.metadata.extra["expected_pga"])

    def test_seed_reproducibility(self):
        a = generate_realistic_waveform(duration=5.0, seed=11)
        b = generate_realistic_waveform(duration=5.0, seed=11)
        c = generate_realistic_waveform(duration=5.0, seed=12)
        np.testing.assert_array_equal(a.amplitude, b.amplitude)
        assert not np.array_equal(a.amplitude, c.amplitude)

    def test_envelope_decays_at_the_end(self):
        w = generate_realistic_waveform(duration=20.0, seed=4)
        t = w.time
        strong = np.abs(w.amplitude[(t >= 4.0) & (t < 12.0)]).max()
        tail = np.abs(w.amplitude[t >= 19.0]).max()
        assert tail < 0.5 * strong

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            (dict(soil_type="clay"), "Soil type"),
            (dict(component="X"), "Component"),
            (dict(distance=-5.0), "Distance"),
            (dict(peak_acceleration=0.0), "peak_acceleration"),
            (dict(sample_rate=50.0), "sample_rate must exceed"),
            (dict(duration=0.0), "positive"),
        ],
    )
    def test_validation(self, kwargs, match):
        with pytest.raises(InvalidParameterError, match=match):
            generate_realistic_waveform(**kwargs)


class TestComponents:

    def test_vertical_component(self):
        h = generate_realistic_waveform(duration=5.0, seed=5)
        z = generate_vertical_component(h, 0.5)
        np.testing.assert_allclose(z.amplitude, 0.5 * h.amplitude)
        np.testing.assert_array_equal(z.time, h.time)
        assert z.metadata.component == "Z"
        assert z.metadata.extra["vh_ratio"] == 0.5
        assert z.metadata.extra["soil_type"] == "stiff"
        assert h.metadata.component == "E-W"
        assert "vh_ratio" not in h.metadata.extra

    @pytest.mark.parametrize("ratio", [0.0, -0.7])
    def test_vertical_ratio_must_be_positive(self, ratio):
        h = generate_shape_waveform("step", duration=1.0)
        with pytest.raises(InvalidParameterError):
            generate_vertical_component(h, ratio)

    def test_three_components(self):
        comps = generate_three_component_waveform(duration=5.0, magnitude=6.5, seed=9)
        assert set(comps) == {"EW", "NS", "Z"}
        assert comps["EW"].metadata.component == "E-W"
        assert comps["NS"].metadata.component == "N-S"
        assert comps["Z"].metadata.component == "Z"
        ns = generate_realistic_waveform(duration=5.0, magnitude=6.5, component="N-S", seed=1009)
        np.testing.assert_array_equal(comps["NS"].amplitude, ns.amplitude)
        assert not np.array_equal(comps["EW"].amplitude, comps["NS"].amplitude)
        # larger magnitude, smaller V/H
        np.testing.assert_allclose(comps["Z"].amplitude, (0.7 - 0.065) * comps["EW"].amplitude)
        assert comps["Z"].peak_amplitude == pytest.approx(0.3 * 0.635)
