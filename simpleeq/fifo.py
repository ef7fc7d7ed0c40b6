"""Single-producer single-consumer queues for audio blocks."""

from __future__ import annotations

import copy
from enum import IntEnum
from typing import Any, Optional

import numpy as np


class Fifo:
    """A fixed-size ring of slots; holds at most ``CAPACITY - 1`` items."""

    CAPACITY = 30

    def __init__(self) -> None:
        self._slots: list[Any] = [None] * self.CAPACITY
        self._read = 0
        self._write = 0

    def prepare(self, *args: int) -> None:
        """Fill every slot with zeros.

        ``prepare(num_elements)`` prepares one-dimensional blocks,
        ``prepare(num_channels, num_samples)`` prepares multi-channel buffers.
        """
        if len(args) not in (1, 2):
            raise TypeError("prepare() takes either num_elements or num_channels, num_samples")
        for value in args:
            if value < 0:
                raise ValueError(f"size must not be negative: {value}")
        shape = tuple(int(value) for value in args)
        self._slots = [np.zeros(shape, dtype=np.float32) for _ in range(self.CAPACITY)]

    def push(self, item: Any) -> bool:
        """Store a copy of ``item``; return False when the queue is full."""
        if self.num_available_for_reading() >= self.CAPACITY - 1:
            return False
        self._slots[self._write] = copy.deepcopy(item)
        self._write = (self._write + 1) % self.CAPACITY
        return True

    def pull(self) -> Optional[Any]:
        """Return a copy of the oldest item, or None when the queue is empty."""
        if self.num_available_for_reading() == 0:
            return None
        item = self._slots[self._read]
        self._read = (self._read + 1) % self.CAPACITY
        return copy.deepcopy(item)

    def num_available_for_reading(self) -> int:
        return (self._write - self._read) % self.CAPACITY


class Channel(IntEnum):
    RIGHT = 0
    LEFT = 1


class SingleChannelSampleFifo:
    """Collects the samples of one channel into fixed-size buffers."""

    def __init__(self, channel: Channel) -> None:
        self._channel = Channel(channel)
        self._fifo = Fifo()
        self._buffer_to_fill = np.zeros((1, 0), dtype=np.float32)
        self._fifo_index = 0
        self._prepared = False
        self._size = 0

    def prepare(self, buffer_size: int) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer size must be positive: {buffer_size}")
        self._prepared = False
        self._size = int(buffer_size)
        self._buffer_to_fill = np.zeros((1, self._size), dtype=np.float32)
        self._fifo.prepare(1, self._size)
        self._fifo_index = 0
        self._prepared = True

    def update(self, buffer: Any) -> None:
        """Feed the chosen channel of a (channels, samples) buffer."""
        if not self._prepared:
            raise RuntimeError("update() called before prepare()")
        data = np.asarray(buffer)
        if data.ndim != 2:
            raise ValueError("buffer must be two-dimensional: (channels, samples)")
        samples = data[self._channel.value]
        position = 0
        while position < len(samples):
            if self._fifo_index == self._size:
                self._fifo.push(self._buffer_to_fill)
                self._fifo_index = 0
            take = min(self._size - self._fifo_index, len(samples) - position)
            self._buffer_to_fill[0, self._fifo_index:self._fifo_index + take] = samples[
                position:position + take
            ]
            self._fifo_index += take
            position += take

    def num_complete_buffers_available(self) -> int:
        return self._fifo.num_available_for_reading()

    def is_prepared(self) -> bool:
        return self._prepared

    def size(self) -> int:
        return self._size

    def get_audio_buffer(self) -> Optional[np.ndarray]:
        """Return the oldest complete (1, size) buffer, or None if there is none."""
        return self._fifo.pull()