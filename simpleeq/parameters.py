"""Automatable parameters of the equaliser and their saved state."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Iterable, Union

from .filters import ChainSettings, Slope

STATE_TYPE = "Parameters"

LOW_CUT_FREQ = "LowCut Freq"
HIGH_CUT_FREQ = "HighCut Freq"
PEAK_FREQ = "Peak Freq"
PEAK_GAIN = "Peak Gain"
PEAK_QUALITY = "Peak Quality"
LOW_CUT_SLOPE = "LowCut Slope"
HIGH_CUT_SLOPE = "HighCut Slope"

FILTER_SLOPE_CHOICES = ("12 db/Oct", "24 db/Oct", "36 db/Oct", "48 db/Oct")


@dataclass(frozen=True)
class NormalisableRange:
    """A value range with an optional step size and skew factor."""

    start: float
    end: float
    interval: float = 0.0
    skew: float = 1.0

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("range end must be greater than its start")
        if self.interval < 0:
            raise ValueError("interval must not be negative")
        if self.skew <= 0:
            raise ValueError("skew must be positive")

    def convert_to_0to1(self, value: float) -> float:
        """Map a value in the range to a proportion between 0 and 1."""
        proportion = (value - self.start) / (self.end - self.start)
        proportion = min(1.0, max(0.0, proportion))
        if self.skew == 1.0:
            return proportion
        return proportion**self.skew

    def convert_from_0to1(self, proportion: float) -> float:
        """Map a proportion between 0 and 1 to a legal value in the range."""
        proportion = min(1.0, max(0.0, proportion))
        if self.skew != 1.0 and proportion > 0.0:
            proportion = math.exp(math.log(proportion) / self.skew)
        return self.snap_to_legal_value(self.start + (self.end - self.start) * proportion)

    def snap_to_legal_value(self, value: float) -> float:
        """Round to the nearest step and clamp into the range."""
        if self.interval > 0:
            value = self.start + self.interval * math.floor((value - self.start) / self.interval + 0.5)
        return min(self.end, max(self.start, value))


@dataclass
class FloatParameter:
    """A continuous parameter."""

    parameter_id: str
    name: str
    range: NormalisableRange
    default: float
    value: float = field(init=False)

    def __post_init__(self) -> None:
        self.value = self.range.snap_to_legal_value(float(self.default))

    def set_value(self, value: float) -> None:
        self.value = self.range.snap_to_legal_value(float(value))

    def set_normalised(self, proportion: float) -> None:
        self.value = self.range.convert_from_0to1(float(proportion))

    def normalised(self) -> float:
        return self.range.convert_to_0to1(self.value)


@dataclass
class ChoiceParameter:
    """A parameter that selects one of several named options."""

    parameter_id: str
    name: str
    choices: tuple
    default: int = 0
    value: float = field(init=False)

    def __post_init__(self) -> None:
        self.choices = tuple(self.choices)
        if len(self.choices) < 2:
            raise ValueError("a choice parameter needs at least two choices")
        self.set_value(self.default)

    @property
    def range(self) -> NormalisableRange:
        return NormalisableRange(0.0, float(len(self.choices) - 1), 1.0)

    def set_value(self, value: Union[int, float, str]) -> None:
        """Select a choice by index or by its name."""
        if isinstance(value, str):
            try:
                value = self.choices.index(value)
            except ValueError:
                raise ValueError(f"unknown choice {value!r} for {self.parameter_id!r}") from None
        self.value = self.range.snap_to_legal_value(float(value))

    def set_normalised(self, proportion: float) -> None:
        self.value = self.range.convert_from_0to1(float(proportion))

    def normalised(self) -> float:
        return self.range.convert_to_0to1(self.value)

    def current_choice(self) -> str:
        return self.choices[int(self.value)]


Parameter = Union[FloatParameter, ChoiceParameter]


class ParameterState:
    """The set of parameters, addressable by identifier, with byte serialisation."""

    def __init__(self, parameters: Iterable[Parameter]) -> None:
        self._parameters: dict[str, Parameter] = {}
        for parameter in parameters:
            if parameter.parameter_id in self._parameters:
                raise ValueError(f"duplicate parameter id {parameter.parameter_id!r}")
            self._parameters[parameter.parameter_id] = parameter

    def __getitem__(self, parameter_id: str) -> Parameter:
        try:
            return self._parameters[parameter_id]
        except KeyError:
            raise KeyError(f"unknown parameter {parameter_id!r}") from None

    def __iter__(self):
        return iter(self._parameters.values())

    def __len__(self) -> int:
        return len(self._parameters)

    def raw_value(self, parameter_id: str) -> float:
        return self[parameter_id].value

    def set_value(self, parameter_id: str, value: Union[float, str]) -> None:
        self[parameter_id].set_value(value)

    def to_bytes(self) -> bytes:
        document = {
            "type": STATE_TYPE,
            "parameters": {pid: p.value for pid, p in self._parameters.items()},
        }
        return json.dumps(document, sort_keys=True).encode("utf-8")

    def replace_state(self, data: bytes) -> None:
        """Load values saved by :meth:`to_bytes`; raise ValueError on malformed data."""
        try:
            document = json.loads(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as error:
            raise ValueError("state data is not valid") from error
        if not isinstance(document, dict) or not isinstance(document.get("parameters"), dict):
            raise ValueError("state data is not valid")
        values = document["parameters"]
        for value in values.values():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError("state data holds a non-numeric value")
        for parameter_id, parameter in self._parameters.items():
            if parameter_id in values:
                parameter.set_value(float(values[parameter_id]))


def create_parameter_layout() -> list[Parameter]:
    """Return the equaliser's parameters with their ranges and defaults."""
    frequency_range = NormalisableRange(20.0, 20000.0, 0.001, 0.25)
    return [
        FloatParameter(LOW_CUT_FREQ, LOW_CUT_FREQ, frequency_range, 20.0),
        FloatParameter(HIGH_CUT_FREQ, HIGH_CUT_FREQ, frequency_range, 20000.0),
        FloatParameter(PEAK_FREQ, PEAK_FREQ, frequency_range, 750.0),
        FloatParameter(PEAK_GAIN, PEAK_GAIN, NormalisableRange(-24.0, 24.0, 0.5, 1.0), 0.0),
        FloatParameter(PEAK_QUALITY, PEAK_QUALITY, NormalisableRange(0.1, 10.0, 0.05, 1.0), 1.0),
        ChoiceParameter(LOW_CUT_SLOPE, LOW_CUT_SLOPE, FILTER_SLOPE_CHOICES, 0),
        ChoiceParameter(HIGH_CUT_SLOPE, HIGH_CUT_SLOPE, FILTER_SLOPE_CHOICES, 0),
    ]


def get_chain_settings(state: ParameterState) -> ChainSettings:
    """Read the current filter settings out of the parameter state."""
    return ChainSettings(
        peak_freq=state.raw_value(PEAK_FREQ),
        peak_gain_in_decibels=state.raw_value(PEAK_GAIN),
        peak_quality=state.raw_value(PEAK_QUALITY),
        low_cut_freq=state.raw_value(LOW_CUT_FREQ),
        high_cut_freq=state.raw_value(HIGH_CUT_FREQ),
        low_cut_slope=Slope(int(state.raw_value(LOW_CUT_SLOPE))),
        high_cut_slope=Slope(int(state.raw_value(HIGH_CUT_SLOPE))),
    )