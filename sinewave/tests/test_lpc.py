from __future__ import annotations

import numpy as np
import pytest
from scipy.linalg import solve_toeplitz

from sinewave.dsp.lpc import autocorrelate, frame_lpc, hann_window, iter_frames, levinson_durbin


def _sinusoid_autocorr(order: int, omega: float = 2 * np.pi * 0.07, noise: float = 0.1) -> np.ndarray:
    lags = np.arange(order + 1)
    r = 0.5 * np.cos(omega * lags)
    r[0] += noise
    return r


@pytest.mark.parametrize("order", [2, 6, 12])
def test_levinson_matches_normal_equations(order: int) -> None:
    r = _sinusoid_autocorr(order)
    model = levinson_durbin(r, order)
    direct = solve_toeplitz((r[:-1], r[:-1]), r[1:])

    assert model.coeffs[0] == 1.0
    assert model.coeffs.size == order + 1
    np.testing.assert_allclose(-model.coeffs[1:], direct, atol=1e-6)
    assert model.gain > 0


def test_levinson_on_windowed_frame_matches_direct_solve(synth_vowel) -> None:
    frame = synth_vowel()[1000:1512] * hann_window(512)
    r = autocorrelate(frame, 12)
    model = frame_lpc(frame, 12)
    direct = solve_toeplitz((r[:-1], r[:-1]), r[1:])
    np.testing.assert_allclose(-model.coeffs[1:], direct, atol=1e-6)

    residual = r[0] - np.dot(direct, r[1:])
    assert model.gain == pytest.approx(np.sqrt(residual), rel=1e-6)


def test_silent_frame_returns_identity() -> None:
    model = frame_lpc(np.zeros(512), 12)
    assert model.silent
    assert model.degenerate
    assert model.gain == 0.0
    np.testing.assert_array_equal(model.coeffs, np.r_[1.0, np.zeros(12)])


def test_autocorrelation_is_biased_sum() -> None:
    x = np.array([1.0, 2.0, 3.0])
    np.testing.assert_allclose(autocorrelate(x, 4), [14.0, 8.0, 3.0, 0.0, 0.0])


def test_frames_are_centered_and_stamped() -> None:
    x = np.arange(1, 1025, dtype=np.float64)
    frames = list(iter_frames(x, 256, 8000.0, np.ones(512)))

    assert len(frames) == 4
    assert [f.time for f in frames] == [0.0, 0.032, 0.064, 0.096]
    first = frames[0].samples
    # (512 - 256) / 2 zeros lead the first frame
    np.testing.assert_array_equal(first[:128], 0.0)
    assert first[128] == 1.0
    assert frames[-1].samples.size == 512


def test_hann_window_is_symmetric() -> None:
    w = hann_window(512)
    assert w[0] == pytest.approx(0.0)
    assert w[-1] == pytest.approx(0.0)
    np.testing.assert_allclose(w, w[::-1])
