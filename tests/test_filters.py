import math

import numpy as np
import pytest

from simpleeq.filters import (
    ChainPosition,
    ChainSettings,
    Coefficients,
    CutFilter,
    IIRFilter,
    MonoChain,
    Slope,
    decibels_to_gain,
    design_highpass_butterworth,
    design_lowpass_butterworth,
    gain_to_decibels,
    make_high_cut_filter,
    make_low_cut_filter,
    make_peak_filter,
    peak_coefficients,
    update_cut_filter,
)

SAMPLE_RATE = 48000.0


def _cascade_magnitude(stages, frequency):
    return math.prod(stage.magnitude_for_frequency(frequency, SAMPLE_RATE) for stage in stages)


def test_decibel_gain_round_trip():
    for db in (-24.0, -6.0, 0.0, 12.5):
        assert gain_to_decibels(decibels_to_gain(db)) == pytest.approx(db)


def test_decibels_at_floor_are_silence():
    assert decibels_to_gain(-80.0, -80.0) == 0.0


def test_gain_to_decibels_clamps_to_floor():
    assert gain_to_decibels(0.0, -80.0) == -80.0
    assert gain_to_decibels(1e-12, -80.0) == -80.0


def test_coefficients_are_normalised():
    coefficients = Coefficients((2.0, 4.0), (2.0, 1.0))
    assert coefficients.a[0] == 1.0
    assert coefficients.b == (1.0, 2.0)


def test_coefficients_reject_zero_a0():
    with pytest.raises(ValueError):
        Coefficients((1.0,), (0.0, 1.0))


def test_peak_with_unity_gain_is_flat():
    coefficients = peak_coefficients(SAMPLE_RATE, 750.0, 1.0, 1.0)
    assert coefficients.b == pytest.approx(coefficients.a)


def test_peak_gain_at_centre_frequency():
    gain = decibels_to_gain(6.0)
    coefficients = peak_coefficients(SAMPLE_RATE, 1000.0, 2.0, gain)
    assert coefficients.magnitude_for_frequency(1000.0, SAMPLE_RATE) == pytest.approx(gain)


def test_make_peak_filter_uses_settings():
    settings = ChainSettings(peak_freq=2000.0, peak_gain_in_decibels=-12.0, peak_quality=0.7)
    coefficients = make_peak_filter(settings, SAMPLE_RATE)
    assert coefficients.magnitude_for_frequency(2000.0, SAMPLE_RATE) == pytest.approx(
        decibels_to_gain(-12.0)
    )


@pytest.mark.parametrize("kwargs", [
    dict(sample_rate=0.0, frequency=100.0, q=1.0, gain_factor=1.0),
    dict(sample_rate=SAMPLE_RATE, frequency=30000.0, q=1.0, gain_factor=1.0),
    dict(sample_rate=SAMPLE_RATE, frequency=100.0, q=0.0, gain_factor=1.0),
])
def test_peak_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        peak_coefficients(**kwargs)


@pytest.mark.parametrize("order", [2, 4, 6, 8])
def test_highpass_shape(order):
    stages = design_highpass_butterworth(100.0, SAMPLE_RATE, order)
    assert len(stages) == order // 2
    assert _cascade_magnitude(stages, 0.0) == pytest.approx(0.0, abs=1e-9)
    assert _cascade_magnitude(stages, SAMPLE_RATE / 2) == pytest.approx(1.0)
    assert _cascade_magnitude(stages, 100.0) == pytest.approx(math.sqrt(0.5), rel=1e-6)


@pytest.mark.parametrize("order", [2, 4, 6, 8])
def test_lowpass_shape(order):
    stages = design_lowpass_butterworth(5000.0, SAMPLE_RATE, order)
    assert _cascade_magnitude(stages, 0.0) == pytest.approx(1.0)
    assert _cascade_magnitude(stages, SAMPLE_RATE / 2) == pytest.approx(0.0, abs=1e-9)
    assert _cascade_magnitude(stages, 5000.0) == pytest.approx(math.sqrt(0.5), rel=1e-6)


def test_odd_order_starts_with_first_order_stage():
    stages = design_highpass_butterworth(200.0, SAMPLE_RATE, 3)
    assert [stage.order for stage in stages] == [1, 2]
    assert _cascade_magnitude(stages, 200.0) == pytest.approx(math.sqrt(0.5), rel=1e-6)


def test_design_rejects_zero_order():
    with pytest.raises(ValueError):
        design_lowpass_butterworth(1000.0, SAMPLE_RATE, 0)


@pytest.mark.parametrize("slope, stages", [
    (Slope.SLOPE_12, 1), (Slope.SLOPE_24, 2), (Slope.SLOPE_36, 3), (Slope.SLOPE_48, 4),
])
def test_cut_filter_stage_count_follows_slope(slope, stages):
    settings = ChainSettings(low_cut_freq=50.0, high_cut_freq=15000.0,
                             low_cut_slope=slope, high_cut_slope=slope)
    assert len(make_low_cut_filter(settings, SAMPLE_RATE)) == stages
    assert len(make_high_cut_filter(settings, SAMPLE_RATE)) == stages


def test_update_cut_filter_bypasses_unused_stages():
    chain = CutFilter()
    coefficients = design_highpass_butterworth(100.0, SAMPLE_RATE, 8)
    update_cut_filter(chain, coefficients, Slope.SLOPE_24)
    assert chain.bypassed == [False, False, True, True]
    assert chain.stages[0].coefficients == coefficients[0]
    assert chain.stages[1].coefficients == coefficients[1]


def test_fully_bypassed_cut_filter_passes_input():
    chain = CutFilter()
    chain.bypassed = [True] * CutFilter.NUM_STAGES
    signal = np.linspace(-1.0, 1.0, 16)
    assert np.array_equal(chain.process(signal), signal)


def test_filter_state_carries_across_blocks():
    coefficients = peak_coefficients(SAMPLE_RATE, 500.0, 1.5, decibels_to_gain(9.0))
    signal = np.sin(np.arange(512) * 0.3)
    whole = IIRFilter(coefficients).process(signal)
    split_filter = IIRFilter(coefficients)
    halves = np.concatenate([split_filter.process(signal[:200]), split_filter.process(signal[200:])])
    assert np.allclose(whole, halves)


def test_reset_clears_state():
    coefficients = design_lowpass_butterworth(1000.0, SAMPLE_RATE, 2)[0]
    iir = IIRFilter(coefficients)
    impulse = np.zeros(32)
    impulse[0] = 1.0
    first = iir.process(impulse)
    iir.reset()
    assert np.allclose(iir.process(impulse), first)


def test_default_chain_passes_signal_through():
    chain = MonoChain()
    signal = np.cos(np.arange(64) * 0.1)
    assert np.allclose(chain.process(signal), signal)


def test_chain_positions_index_components():
    chain = MonoChain()
    assert chain[ChainPosition.LOW_CUT] is chain.low_cut
    assert chain[ChainPosition.PEAK] is chain.peak
    assert chain[ChainPosition.HIGH_CUT] is chain.high_cut


def test_configured_chain_removes_dc():
    settings = ChainSettings(peak_freq=750.0, peak_gain_in_decibels=0.0, peak_quality=1.0,
                             low_cut_freq=100.0, high_cut_freq=20000.0)
    chain = MonoChain()
    update_cut_filter(chain.low_cut, make_low_cut_filter(settings, SAMPLE_RATE), settings.low_cut_slope)
    chain.peak.coefficients = make_peak_filter(settings, SAMPLE_RATE)
    update_cut_filter(chain.high_cut, make_high_cut_filter(settings, SAMPLE_RATE), settings.high_cut_slope)
    output = chain.process(np.ones(48000))
    assert abs(output[-1]) < 1e-3