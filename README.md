# simpleeq

A stereo three-band equaliser as a Python library. There are three filters:

- a low-cut (high-pass) filter,
- a peak (bell) filter,
- a high-cut (low-pass) filter.

The cut filters are Butterworth designs. Their slope can be 12, 24, 36 or 48 dB/oct. The library also turns audio into decibel spectra and turns those spectra into smoothed paths for drawing a spectrum analyser.

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install ".[test]"
```

## Modules

### `simpleeq.processor`

`SimpleEQProcessor` is the stereo processor.

- Call `prepare_to_play(sample_rate, samples_per_block)` first. It sets up the filters and the per-channel sample queues.
- `process_block(buffer)` does the following:
  - It takes a `(channels, samples)` array with at least two channels.
  - It reads the current parameters and filters channel 0 with the left chain and channel 1 with the right chain.
  - It returns the filtered copy. The buffer you pass in is not changed.
  - It feeds the filtered result to `left_channel_fifo` and `right_channel_fifo`.
- `get_state_information()` saves the parameters as bytes, and `set_state_information(data)` restores them. Data that cannot be read is ignored.
- `is_buses_layout_supported(inputs, outputs)` accepts mono or stereo output when the input channel count matches the output channel count.

### `simpleeq.parameters`

- `create_parameter_layout()` returns these parameters:
  - `LowCut Freq`, `HighCut Freq` and `Peak Freq` range from 20 to 20000 Hz, with a skewed range.
  - `Peak Gain` ranges from -24 to 24 dB in steps of 0.5.
  - `Peak Quality` ranges from 0.1 to 10 in steps of 0.05.
  - `LowCut Slope` and `HighCut Slope` are choices of `12 db/Oct` to `48 db/Oct`.
- `NormalisableRange` converts values to and from a 0–1 proportion and snaps them to legal steps.
- `FloatParameter` and `ChoiceParameter` hold the values. A choice can be set by index or by name.
- `ParameterState` looks parameters up by id.
  - `to_bytes()` saves the values as a JSON document.
  - `replace_state(data)` loads them back and raises `ValueError` on malformed data.
- `get_chain_settings(state)` builds a `ChainSettings` from the state.

### `simpleeq.filters`

- `decibels_to_gain` and `gain_to_decibels` convert between decibels and linear gain.
- `Slope`, `ChainPosition` and `ChainSettings` describe the filter setup.
- `Coefficients` holds IIR coefficients normalised to `a[0] == 1`. `magnitude_for_frequency(frequency, sample_rate)` gives the magnitude response at a frequency.
- The filter designs:
  - `peak_coefficients` designs a peak filter.
  - `design_highpass_butterworth` and `design_lowpass_butterworth` each return a cascade of first- and second-order stages.
  - `make_peak_filter`, `make_low_cut_filter` and `make_high_cut_filter` design the filters from a `ChainSettings`.
- The filter objects:
  - `IIRFilter` is a stateful filter.
  - `CutFilter` is four bypassable stages.
  - `MonoChain` applies low cut, then peak, then high cut.
  - `update_cut_filter(chain, coefficients, slope)` turns on as many stages as the slope needs.

### `simpleeq.fifo`

- `Fifo` is a 30-slot queue, so it holds at most 29 items. `push` and `pull` store and return copies. `push` returns `False` when the queue is full, and `pull` returns `None` when it is empty.
- `SingleChannelSampleFifo(channel)` takes one channel (`Channel.LEFT` or `Channel.RIGHT`) of each buffer passed to `update`. It collects the samples into `(1, size)` blocks, which `get_audio_buffer()` returns.

### `simpleeq.analyzer`

- `FFTDataGenerator`:
  - It applies a Blackman-Harris window to a block of audio and takes its FFT.
  - It queues the normalised magnitudes in decibels.
  - The FFT size is set by `FFTOrder`: 2048, 4096 or 8192.
- `AnalyzerPathGenerator.generate_path(...)`:
  - It smooths a spectrum with an attack/decay envelope.
  - It places the bins on a logarithmic 20 Hz–20 kHz axis inside a `Rectangle`.
  - It queues the result as a closed `Path` of move, line and quadratic commands.
- `map_from_log10` and `rotate_point_around` are small geometry helpers.

### `simpleeq.palette`

- `Colour` is an ARGB colour value.
- `Palette` holds the named interface colours.

## Example

```python
import numpy as np
from simpleeq.processor import SimpleEQProcessor

proc = SimpleEQProcessor()
proc.prepare_to_play(48000.0, 512)
proc.parameters.set_value("Peak Gain", 6.0)
proc.parameters.set_value("LowCut Slope", "36 db/Oct")

block = np.random.default_rng(0).standard_normal((2, 512)).astype(np.float32)
filtered = proc.process_block(block)

saved = proc.get_state_information()
proc.set_state_information(saved)
```

## What this package does not do

- It has no graphical editor. The knobs, control panels and response-curve display are not included.
- It does not draw anything. `Path` is only a list of drawing commands.
- It does not open audio devices or load as a plugin in a host application. You supply the sample buffers yourself.
- It has no command-line program.

## Tests

```
pytest
```