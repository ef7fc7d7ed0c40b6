"""Spectrum analysis: FFT data generation and conversion of spectra into paths."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Optional, Sequence

import numpy as np

from .fifo import Fifo


class FFTOrder(IntEnum):
    ORDER_2048 = 11
    ORDER_4096 = 12
    ORDER_8192 = 13


def _blackman_harris(size: int) -> np.ndarray:
    """Blackman-Harris window, normalised so that its mean is one."""
    if size == 1:
        return np.ones(1, dtype=np.float64)
    phase = 2.0 * np.pi * np.arange(size) / (size - 1)
    window = (
        0.35875
        - 0.48829 * np.cos(phase)
        + 0.14128 * np.cos(2.0 * phase)
        - 0.01168 * np.cos(3.0 * phase)
    )
    total = window.sum()
    if total > 0:
        window *= size / total
    return window


def _gains_to_decibels(gains: np.ndarray, minus_infinity_db: float) -> np.ndarray:
    with np.errstate(divide="ignore"):
        decibels = 20.0 * np.log10(gains)
    return np.where(gains > 0, np.maximum(decibels, minus_infinity_db), minus_infinity_db)


class FFTDataGenerator:
    """Turns blocks of audio into decibel spectra and queues them for rendering."""

    def __init__(self, order: FFTOrder = FFTOrder.ORDER_2048) -> None:
        self._order = FFTOrder.ORDER_2048
        self._window = np.ones(0)
        self._fft_data = np.zeros(0, dtype=np.float32)
        self._fifo = Fifo()
        self.change_order(order)

    @property
    def order(self) -> FFTOrder:
        return self._order

    def change_order(self, new_order: FFTOrder) -> None:
        """Switch FFT size, rebuilding the window, the work buffer and the queue."""
        self._order = FFTOrder(new_order)
        size = self.fft_size()
        self._window = _blackman_harris(size)
        self._fft_data = np.zeros(size * 2, dtype=np.float32)
        self._fifo.prepare(self._fft_data.size)

    def fft_size(self) -> int:
        return 1 << int(self._order)

    def produce_fft_data_for_rendering(self, audio_data: Any, negative_infinity: float) -> bool:
        """Analyse the first channel of ``audio_data`` and queue the spectrum.

        The queued block holds ``2 * fft_size`` values; the first
        ``fft_size // 2`` are normalised magnitudes in decibels. Returns False
        when the queue was full and the block was dropped.
        """
        size = self.fft_size()
        data = np.asarray(audio_data, dtype=np.float32)
        if data.ndim == 2:
            if data.shape[0] == 0:
                raise ValueError("audio data has no channels")
            samples = data[0]
        elif data.ndim == 1:
            samples = data
        else:
            raise ValueError("audio data must be one- or two-dimensional")
        if samples.size < size:
            raise ValueError(f"need at least {size} samples, got {samples.size}")

        windowed = samples[:size].astype(np.float64) * self._window
        magnitudes = np.abs(np.fft.fft(windowed))

        num_bins = size // 2
        fft_data = np.zeros(size * 2, dtype=np.float32)
        fft_data[:size] = magnitudes
        normalised = magnitudes[:num_bins] / num_bins
        fft_data[:num_bins] = _gains_to_decibels(normalised, negative_infinity)
        self._fft_data = fft_data
        return self._fifo.push(fft_data)

    def num_available_fft_data_blocks(self) -> int:
        return self._fifo.num_available_for_reading()

    def get_fft_data(self) -> Optional[np.ndarray]:
        """Return the oldest queued spectrum, or None if there is none."""
        return self._fifo.pull()


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float

    def bottom(self) -> float:
        return self.y + self.height


class PathCommand(Enum):
    MOVE = "move"
    LINE = "line"
    QUAD = "quad"
    CLOSE = "close"


@dataclass(frozen=True)
class PathElement:
    command: PathCommand
    points: tuple = ()


@dataclass
class Path:
    """A sequence of drawing commands made of lines and quadratic curves."""

    elements: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def _ensure_started(self) -> None:
        if not self.elements:
            self.start_new_sub_path(0.0, 0.0)

    def start_new_sub_path(self, x: float, y: float) -> None:
        self.elements.append(PathElement(PathCommand.MOVE, (float(x), float(y))))

    def line_to(self, x: float, y: float) -> None:
        self._ensure_started()
        self.elements.append(PathElement(PathCommand.LINE, (float(x), float(y))))

    def quadratic_to(self, control_x: float, control_y: float, end_x: float, end_y: float) -> None:
        self._ensure_started()
        self.elements.append(
            PathElement(
                PathCommand.QUAD,
                (float(control_x), float(control_y), float(end_x), float(end_y)),
            )
        )

    def close_sub_path(self) -> None:
        if self.elements and self.elements[-1].command is not PathCommand.CLOSE:
            self.elements.append(PathElement(PathCommand.CLOSE))


def map_from_log10(value: float, range_min: float, range_max: float) -> float:
    """Map a value on a logarithmic scale to a proportion of the range."""
    if range_min <= 0 or range_max <= 0:
        raise ValueError("logarithmic range bounds must be positive")
    if range_max == range_min:
        raise ValueError("logarithmic range must not be empty")
    if value <= 0:
        raise ValueError("value must be positive")
    log_min = math.log10(range_min)
    log_max = math.log10(range_max)
    return (math.log10(value) - log_min) / (log_max - log_min)


def rotate_point_around(
    point: tuple[float, float], center: tuple[float, float], angle_radians: float
) -> tuple[float, float]:
    """Rotate ``point`` about ``center`` by ``angle_radians``."""
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    cos_a = math.cos(angle_radians)
    sin_a = math.sin(angle_radians)
    return (
        dx * cos_a - dy * sin_a + center[0],
        dx * sin_a + dy * cos_a + center[1],
    )


class AnalyzerPathGenerator:
    """Smooths decibel spectra with an envelope and converts them into paths."""

    ATTACK = 0.5
    DECAY_DB = 0.85
    MIN_FREQUENCY = 20.0
    MAX_FREQUENCY = 20000.0
    RIGHT_OVERHANG = 30.0

    def __init__(self) -> None:
        self._fifo = Fifo()
        self._envelope: list[float] = []

    def generate_path(
        self,
        render_data: Sequence[float],
        fft_bounds: Rectangle,
        fft_size: int,
        bin_width: float,
        negative_infinity: float,
    ) -> bool:
        """Build a closed path from ``render_data`` and queue it.

        Returns False when the queue was full and the path was dropped.
        """
        values = [float(v) for v in render_data]
        num_bins = int(fft_size) // 2
        if not values or len(values) < num_bins:
            raise ValueError("render data is shorter than the number of bins")
        if negative_infinity >= 0:
            raise ValueError("negative infinity must be below 0 dB")

        if len(self._envelope) != len(values):
            self._envelope = [float(negative_infinity)] * len(values)
        envelope = self._envelope

        top = fft_bounds.y
        bottom = fft_bounds.bottom()
        width = fft_bounds.width

        def to_y(level: float) -> float:
            return bottom + (top - bottom) * (level - negative_infinity) / (0.0 - negative_infinity)

        def to_x(bin_index: int) -> int:
            proportion = map_from_log10(bin_index * bin_width, self.MIN_FREQUENCY, self.MAX_FREQUENCY)
            return math.floor(proportion * width)

        path = Path()
        path.start_new_sub_path(0.0, bottom)
        path.line_to(0.0, to_y(envelope[0]))

        bin_num = 1
        while bin_num < num_bins:
            resolution = 2 + (18 * bin_num) // num_bins
            level = values[bin_num]
            env = envelope[bin_num]
            if level > env:
                env += (level - env) * self.ATTACK
            else:
                env = max(env - self.DECAY_DB, level)
            envelope[bin_num] = env

            y = to_y(env)
            if math.isfinite(y):
                bin_x = to_x(bin_num)
                next_index = bin_num + resolution
                if next_index >= num_bins:
                    path.line_to(bin_x, y)
                else:
                    next_y = to_y(envelope[next_index])
                    next_x = to_x(next_index)
                    path.quadratic_to(bin_x, y, (bin_x + next_x) * 0.5, (y + next_y) * 0.5)
            bin_num += resolution

        path.line_to(width + self.RIGHT_OVERHANG, bottom)
        path.close_sub_path()
        return self._fifo.push(path)

    def num_paths_available(self) -> int:
        return self._fifo.num_available_for_reading()

    def get_path(self) -> Optional[Path]:
        """Return the oldest queued path, or None if there is none."""
        return self._fifo.pull()