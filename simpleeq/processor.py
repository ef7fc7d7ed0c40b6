"""The stereo equaliser processor."""

from __future__ import annotations

from typing import Any

import numpy as np

from .fifo import Channel, SingleChannelSampleFifo
from .filters import (
    ChainPosition,
    MonoChain,
    make_high_cut_filter,
    make_low_cut_filter,
    make_peak_filter,
    update_cut_filter,
)
from .parameters import ParameterState, create_parameter_layout, get_chain_settings


class SimpleEQProcessor:
    """Applies low cut, peak and high cut filters to a stereo signal."""

    NUM_INPUT_CHANNELS = 2
    NUM_OUTPUT_CHANNELS = 2

    def __init__(self) -> None:
        self.parameters = ParameterState(create_parameter_layout())
        self.left_channel_fifo = SingleChannelSampleFifo(Channel.LEFT)
        self.right_channel_fifo = SingleChannelSampleFifo(Channel.RIGHT)
        self.left_chain = MonoChain()
        self.right_chain = MonoChain()
        self.sample_rate = 0.0
        self.samples_per_block = 0

    def prepare_to_play(self, sample_rate: float, samples_per_block: int) -> None:
        if sample_rate <= 0:
            raise ValueError("sample rate must be positive")
        if samples_per_block <= 0:
            raise ValueError("block size must be positive")
        self.sample_rate = float(sample_rate)
        self.samples_per_block = int(samples_per_block)
        self.left_chain.reset()
        self.right_chain.reset()
        self.update_filters()
        self.left_channel_fifo.prepare(self.samples_per_block)
        self.right_channel_fifo.prepare(self.samples_per_block)

    @staticmethod
    def is_buses_layout_supported(input_channels: int, output_channels: int) -> bool:
        """Mono or stereo output, with the input matching the output."""
        if output_channels not in (1, 2):
            return False
        return input_channels == output_channels

    def update_filters(self) -> None:
        """Recompute every filter from the current parameter values."""
        if self.sample_rate <= 0:
            raise RuntimeError("update_filters() called before prepare_to_play()")
        settings = get_chain_settings(self.parameters)

        low_cut = make_low_cut_filter(settings, self.sample_rate)
        peak = make_peak_filter(settings, self.sample_rate)
        high_cut = make_high_cut_filter(settings, self.sample_rate)

        for chain in (self.left_chain, self.right_chain):
            update_cut_filter(chain[ChainPosition.LOW_CUT], low_cut, settings.low_cut_slope)
            chain[ChainPosition.PEAK].coefficients = peak
            update_cut_filter(chain[ChainPosition.HIGH_CUT], high_cut, settings.high_cut_slope)

    def process_block(self, buffer: Any) -> np.ndarray:
        """Filter a (channels, samples) buffer and return the processed copy."""
        if self.sample_rate <= 0:
            raise RuntimeError("process_block() called before prepare_to_play()")
        data = np.array(buffer, dtype=np.float32)
        if data.ndim != 2 or data.shape[0] < 2:
            raise ValueError("buffer must have shape (channels, samples) with at least two channels")

        data[self.NUM_INPUT_CHANNELS:self.NUM_OUTPUT_CHANNELS] = 0.0

        self.update_filters()

        data[0] = self.left_chain.process(data[0])
        data[1] = self.right_chain.process(data[1])

        self.left_channel_fifo.update(data)
        self.right_channel_fifo.update(data)
        return data

    def get_state_information(self) -> bytes:
        return self.parameters.to_bytes()

    def set_state_information(self, data: bytes) -> None:
        """Restore saved parameters; data that cannot be read is ignored."""
        try:
            self.parameters.replace_state(data)
        except ValueError:
            return
        if self.sample_rate > 0:
            self.update_filters()