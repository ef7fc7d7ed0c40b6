"""Filter design and the per-channel filter chain of the equaliser."""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from scipy.signal import lfilter

DEFAULT_MINUS_INFINITY_DB = -100.0


def decibels_to_gain(decibels: float, minus_infinity_db: float = DEFAULT_MINUS_INFINITY_DB) -> float:
    """Convert decibels to a linear gain; anything at or below the floor is silence."""
    if decibels > minus_infinity_db:
        return 10.0 ** (decibels * 0.05)
    return 0.0


def gain_to_decibels(gain: float, minus_infinity_db: float = DEFAULT_MINUS_INFINITY_DB) -> float:
    """Convert a linear gain to decibels, never going below the floor."""
    if gain > 0:
        return max(minus_infinity_db, math.log10(gain) * 20.0)
    return minus_infinity_db


class Slope(IntEnum):
    SLOPE_12 = 0
    SLOPE_24 = 1
    SLOPE_36 = 2
    SLOPE_48 = 3


class ChainPosition(IntEnum):
    LOW_CUT = 0
    PEAK = 1
    HIGH_CUT = 2


@dataclass
class ChainSettings:
    peak_freq: float = 0.0
    peak_gain_in_decibels: float = 0.0
    peak_quality: float = 1.0
    low_cut_freq: float = 0.0
    high_cut_freq: float = 0.0
    low_cut_slope: Slope = Slope.SLOPE_12
    high_cut_slope: Slope = Slope.SLOPE_12


@dataclass(frozen=True)
class Coefficients:
    """IIR coefficients, normalised so that ``a[0] == 1``."""

    b: tuple
    a: tuple

    def __post_init__(self) -> None:
        b = tuple(float(v) for v in self.b)
        a = tuple(float(v) for v in self.a)
        if not b or not a or a[0] == 0.0:
            raise ValueError("coefficients need a non-zero a0 and at least one b term")
        a0 = a[0]
        object.__setattr__(self, "b", tuple(v / a0 for v in b))
        object.__setattr__(self, "a", tuple(v / a0 for v in a))

    @property
    def order(self) -> int:
        return max(len(self.b), len(self.a)) - 1

    def magnitude_for_frequency(self, frequency: float, sample_rate: float) -> float:
        """Return the linear magnitude response at ``frequency`` Hz."""
        if sample_rate <= 0:
            raise ValueError("sample rate must be positive")
        if not 0 <= frequency <= sample_rate * 0.5:
            raise ValueError("frequency must lie between 0 and half the sample rate")
        z_inv = cmath.exp(-2j * math.pi * frequency / sample_rate)
        numerator = sum(c * z_inv**n for n, c in enumerate(self.b))
        denominator = sum(c * z_inv**n for n, c in enumerate(self.a))
        return abs(numerator) / abs(denominator)


IDENTITY = Coefficients((1.0,), (1.0,))


def _check_design(sample_rate: float, frequency: float) -> None:
    if sample_rate <= 0:
        raise ValueError("sample rate must be positive")
    if not 0 < frequency <= sample_rate * 0.5:
        raise ValueError("frequency must lie above 0 and at most half the sample rate")


def peak_coefficients(sample_rate: float, frequency: float, q: float, gain_factor: float) -> Coefficients:
    """Design a peaking (bell) filter with a linear gain at its centre."""
    _check_design(sample_rate, frequency)
    if q <= 0:
        raise ValueError("Q must be positive")
    if gain_factor <= 0:
        raise ValueError("gain factor must be positive")
    amplitude = math.sqrt(gain_factor)
    omega = 2.0 * math.pi * max(frequency, 2.0) / sample_rate
    alpha = math.sin(omega) / (q * 2.0)
    c2 = -2.0 * math.cos(omega)
    alpha_times_a = alpha * amplitude
    alpha_over_a = alpha / amplitude
    return Coefficients(
        (1.0 + alpha_times_a, c2, 1.0 - alpha_times_a),
        (1.0 + alpha_over_a, c2, 1.0 - alpha_over_a),
    )


def _first_order_high_pass(sample_rate: float, frequency: float) -> Coefficients:
    n = math.tan(math.pi * frequency / sample_rate)
    return Coefficients((1.0, -1.0), (n + 1.0, n - 1.0))


def _first_order_low_pass(sample_rate: float, frequency: float) -> Coefficients:
    n = math.tan(math.pi * frequency / sample_rate)
    return Coefficients((n, n), (n + 1.0, n - 1.0))


def _high_pass(sample_rate: float, frequency: float, q: float) -> Coefficients:
    n = math.tan(math.pi * frequency / sample_rate)
    n_squared = n * n
    inv_q = 1.0 / q
    c1 = 1.0 / (1.0 + inv_q * n + n_squared)
    return Coefficients(
        (c1, c1 * -2.0, c1),
        (1.0, c1 * 2.0 * (n_squared - 1.0), c1 * (1.0 - inv_q * n + n_squared)),
    )


def _low_pass(sample_rate: float, frequency: float, q: float) -> Coefficients:
    n = 1.0 / math.tan(math.pi * frequency / sample_rate)
    n_squared = n * n
    inv_q = 1.0 / q
    c1 = 1.0 / (1.0 + inv_q * n + n_squared)
    return Coefficients(
        (c1, c1 * 2.0, c1),
        (1.0, c1 * 2.0 * (1.0 - n_squared), c1 * (1.0 - inv_q * n + n_squared)),
    )


def _butterworth(frequency, sample_rate, order, first_order, second_order) -> list[Coefficients]:
    _check_design(sample_rate, frequency)
    if order <= 0:
        raise ValueError("order must be positive")
    if order % 2 == 1:
        stages = [first_order(sample_rate, frequency)]
        for i in range(order // 2):
            q = 1.0 / (2.0 * math.cos((i + 1.0) * math.pi / order))
            stages.append(second_order(sample_rate, frequency, q))
        return stages
    return [
        second_order(sample_rate, frequency, 1.0 / (2.0 * math.cos((2.0 * i + 1.0) * math.pi / (order * 2.0))))
        for i in range(order // 2)
    ]


def design_highpass_butterworth(frequency: float, sample_rate: float, order: int) -> list[Coefficients]:
    """Design a Butterworth high-pass as a cascade of first/second-order stages."""
    return _butterworth(frequency, sample_rate, order, _first_order_high_pass, _high_pass)


def design_lowpass_butterworth(frequency: float, sample_rate: float, order: int) -> list[Coefficients]:
    """Design a Butterworth low-pass as a cascade of first/second-order stages."""
    return _butterworth(frequency, sample_rate, order, _first_order_low_pass, _low_pass)


def make_peak_filter(chain_settings: ChainSettings, sample_rate: float) -> Coefficients:
    return peak_coefficients(
        sample_rate,
        chain_settings.peak_freq,
        chain_settings.peak_quality,
        decibels_to_gain(chain_settings.peak_gain_in_decibels),
    )


def make_low_cut_filter(chain_settings: ChainSettings, sample_rate: float) -> list[Coefficients]:
    order = (int(chain_settings.low_cut_slope) + 1) * 2
    return design_highpass_butterworth(chain_settings.low_cut_freq, sample_rate, order)


def make_high_cut_filter(chain_settings: ChainSettings, sample_rate: float) -> list[Coefficients]:
    order = (int(chain_settings.high_cut_slope) + 1) * 2
    return design_lowpass_butterworth(chain_settings.high_cut_freq, sample_rate, order)


class IIRFilter:
    """A stateful IIR filter; state is kept between calls to :meth:`process`."""

    def __init__(self, coefficients: Optional[Coefficients] = None) -> None:
        self._coefficients = coefficients if coefficients is not None else IDENTITY
        self._state = np.zeros(self._coefficients.order)

    @property
    def coefficients(self) -> Coefficients:
        return self._coefficients

    @coefficients.setter
    def coefficients(self, value: Coefficients) -> None:
        previous_order = self._coefficients.order
        self._coefficients = value
        if value.order != previous_order:
            self.reset()

    def reset(self) -> None:
        self._state = np.zeros(self._coefficients.order)

    def process(self, samples: Union[Sequence[float], np.ndarray]) -> np.ndarray:
        """Filter a block of samples and return the result as a new array."""
        x = np.asarray(samples, dtype=np.float64)
        if x.ndim != 1:
            raise ValueError("samples must be one-dimensional")
        coefficients = self._coefficients
        if self._state.size == 0:
            return x * coefficients.b[0]
        y, self._state = lfilter(coefficients.b, coefficients.a, x, zi=self._state)
        return y


class CutFilter:
    """Four cascaded filter stages, each of which can be bypassed."""

    NUM_STAGES = 4

    def __init__(self) -> None:
        self.stages = [IIRFilter() for _ in range(self.NUM_STAGES)]
        self.bypassed = [False] * self.NUM_STAGES

    def reset(self) -> None:
        for stage in self.stages:
            stage.reset()

    def process(self, samples: Union[Sequence[float], np.ndarray]) -> np.ndarray:
        y = np.array(samples, dtype=np.float64)
        for stage, bypassed in zip(self.stages, self.bypassed):
            if not bypassed:
                y = stage.process(y)
        return y


def update_cut_filter(chain: CutFilter, coefficients: Iterable[Coefficients], slope: Slope) -> None:
    """Enable as many stages as the slope needs and load their coefficients."""
    slope = Slope(slope)
    coefficients = list(coefficients)
    chain.bypassed = [True] * CutFilter.NUM_STAGES
    for index in range(int(slope) + 1):
        chain.stages[index].coefficients = coefficients[index]
        chain.bypassed[index] = False


class MonoChain:
    """Low cut, peak and high cut filters applied in that order."""

    def __init__(self) -> None:
        self.low_cut = CutFilter()
        self.peak = IIRFilter()
        self.high_cut = CutFilter()

    def __getitem__(self, position: ChainPosition) -> Union[CutFilter, IIRFilter]:
        return (self.low_cut, self.peak, self.high_cut)[ChainPosition(position)]

    def reset(self) -> None:
        self.low_cut.reset()
        self.peak.reset()
        self.high_cut.reset()

    def process(self, samples: Union[Sequence[float], np.ndarray]) -> np.ndarray:
        y = self.low_cut.process(samples)
        y = self.peak.process(y)
        return self.high_cut.process(y)