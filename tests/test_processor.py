import numpy as np
import pytest

from simpleeq.processor import SimpleEQProcessor

SAMPLE_RATE = 44100.0
BLOCK = 512


def sine(freq, n):
    t = np.arange(n) / SAMPLE_RATE
    return np.sin(2 * np.pi * freq * t).astype(np.float32)


def rms(x):
    return float(np.sqrt(np.mean(np.square(x))))


@pytest.fixture
def processor():
    p = SimpleEQProcessor()
    p.prepare_to_play(SAMPLE_RATE, BLOCK)
    return p


def test_process_before_prepare_raises():
    with pytest.raises(RuntimeError):
        SimpleEQProcessor().process_block(np.zeros((2, 16)))


def test_prepare_rejects_bad_arguments():
    with pytest.raises(ValueError):
        SimpleEQProcessor().prepare_to_play(0, BLOCK)


def test_mono_buffer_rejected(processor):
    with pytest.raises(ValueError):
        processor.process_block(np.zeros((1, BLOCK)))


def test_silence_stays_silent(processor):
    out = processor.process_block(np.zeros((2, BLOCK)))
    assert out.shape == (2, BLOCK)
    assert np.all(out == 0.0)


def test_default_settings_pass_mid_frequencies(processor):
    signal = sine(1000.0, BLOCK * 16)
    buffer = np.stack([signal, signal])
    outputs = [processor.process_block(buffer[:, i:i + BLOCK]) for i in range(0, signal.size, BLOCK)]
    out = np.concatenate(outputs, axis=1)
    tail = slice(BLOCK * 8, None)
    assert rms(out[0, tail]) == pytest.approx(rms(signal[tail]), rel=0.05)
    assert rms(out[1, tail]) == pytest.approx(rms(signal[tail]), rel=0.05)


def test_low_cut_attenuates_low_frequencies(processor):
    processor.parameters.set_value("LowCut Freq", 1000.0)
    processor.parameters.set_value("LowCut Slope", 3)
    signal = sine(50.0, BLOCK * 16)
    buffer = np.stack([signal, signal])
    outputs = [processor.process_block(buffer[:, i:i + BLOCK]) for i in range(0, signal.size, BLOCK)]
    out = np.concatenate(outputs, axis=1)
    tail = slice(BLOCK * 8, None)
    assert rms(out[0, tail]) < 0.01 * rms(signal[tail])


def test_fifos_collect_their_channels(processor):
    left = sine(300.0, BLOCK * 2)
    right = np.zeros(BLOCK * 2, dtype=np.float32)
    first = processor.process_block(np.stack([left[:BLOCK], right[:BLOCK]]))
    processor.process_block(np.stack([left[BLOCK:], right[BLOCK:]]))
    assert processor.left_channel_fifo.num_complete_buffers_available() == 1
    assert processor.right_channel_fifo.num_complete_buffers_available() == 1
    # The left fifo reads channel index 1, the right fifo channel index 0.
    np.testing.assert_allclose(processor.left_channel_fifo.get_audio_buffer()[0], first[1])
    np.testing.assert_allclose(processor.right_channel_fifo.get_audio_buffer()[0], first[0])


@pytest.mark.parametrize(
    "inputs, outputs, expected",
    [(2, 2, True), (1, 1, True), (1, 2, False), (2, 1, False), (6, 6, False), (0, 0, False)],
)
def test_buses_layout(inputs, outputs, expected):
    assert SimpleEQProcessor().is_buses_layout_supported(inputs, outputs) is expected


def test_state_round_trip(processor):
    processor.parameters.set_value("Peak Gain", 12.0)
    data = processor.get_state_information()
    other = SimpleEQProcessor()
    other.set_state_information(data)
    assert other.parameters.raw_value("Peak Gain") == pytest.approx(12.0)
    assert other.get_state_information() == data


def test_invalid_state_is_ignored(processor):
    before = processor.get_state_information()
    processor.set_state_information(b"\x00\x01garbage")
    assert processor.get_state_information() == before


def test_update_filters_requires_sample_rate():
    with pytest.raises(RuntimeError):
        SimpleEQProcessor().update_filters()