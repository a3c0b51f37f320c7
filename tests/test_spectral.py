"""Tests for FFT band analysis (pure numpy, no hardware)."""

import numpy as np
import pytest

from bannervis.errors import TransformSetupFailure
from bannervis.extract import triangular_window
from bannervis.spectral import SpectralAnalyzer, band_levels, linear_band_bins, octave_band_bins

FFT_SIZE = 2048
SAMPLE_RATE = 44100


def tone(freq: float, amplitude: float = 20000.0) -> np.ndarray:
    t = np.arange(FFT_SIZE)
    return amplitude * np.sin(2 * np.pi * freq * t / SAMPLE_RATE) * triangular_window(FFT_SIZE)


class TestOctaveBandBins:
    """Test octave bin range computation."""

    def test_bin_count_matches_rows(self):
        assert len(octave_band_bins(FFT_SIZE, 8)) == 8

    def test_first_band_skips_dc(self):
        assert octave_band_bins(FFT_SIZE, 8)[0] == (2, 4)

    def test_width_doubles(self):
        bins = octave_band_bins(FFT_SIZE, 8)
        widths = [hi - lo for lo, hi in bins]
        assert widths == [2, 4, 8, 16, 32, 64, 128, 256]

    def test_bands_contiguous(self):
        bins = octave_band_bins(FFT_SIZE, 8)
        for (_, hi), (lo, _) in zip(bins, bins[1:]):
            assert lo == hi

    def test_scales_with_fft_size(self):
        assert octave_band_bins(4096, 4)[0] == (4, 8)

    def test_first_band_near_40hz(self):
        lo, _ = octave_band_bins(FFT_SIZE, 8)[0]
        assert 30 < lo * SAMPLE_RATE / FFT_SIZE < 50


class TestLinearBandBins:
    """Test linear spectrum bin ranges."""

    def test_one_band_per_column(self):
        assert len(linear_band_bins(80)) == 80

    def test_starts_at_bin_two(self):
        assert linear_band_bins(80)[0] == (2, 3)

    def test_low_columns_single_bin(self):
        bins = linear_band_bins(80)
        assert all(hi - lo == 1 for lo, hi in bins[:40])

    def test_last_column_width(self):
        lo, hi = linear_band_bins(80)[-1]
        assert hi - lo == 46

    def test_widths_never_shrink(self):
        widths = [hi - lo for lo, hi in linear_band_bins(80)]
        assert widths == sorted(widths)

    def test_fits_2048_fft(self):
        assert linear_band_bins(80)[-1][1] <= FFT_SIZE // 2 + 1


class TestAnalyzerSetup:
    """Test transform setup validation."""

    def test_rejects_non_power_of_two(self):
        with pytest.raises(TransformSetupFailure):
            SpectralAnalyzer(2000, [(2, 4)])

    def test_rejects_zero(self):
        with pytest.raises(TransformSetupFailure):
            SpectralAnalyzer(0, [(2, 4)])

    def test_rejects_bands_beyond_nyquist(self):
        with pytest.raises(TransformSetupFailure):
            SpectralAnalyzer(256, octave_band_bins(256, 8))

    def test_rejects_empty_band(self):
        with pytest.raises(TransformSetupFailure):
            SpectralAnalyzer(FFT_SIZE, [(4, 4)])

    def test_rejects_no_bands(self):
        with pytest.raises(TransformSetupFailure):
            SpectralAnalyzer(FFT_SIZE, [])

    def test_wrong_window_length(self):
        analyzer = SpectralAnalyzer(FFT_SIZE, octave_band_bins(FFT_SIZE, 8))
        with pytest.raises(ValueError):
            analyzer.analyze(np.zeros(1024))


class TestAnalyze:
    """Test band energies and the gain statistic."""

    def setup_method(self):
        self.analyzer = SpectralAnalyzer(FFT_SIZE, octave_band_bins(FFT_SIZE, 8))

    def test_transform_length(self):
        assert len(self.analyzer.transform(np.zeros(FFT_SIZE))) == FFT_SIZE // 2 + 1

    def test_energy_conservation(self):
        """Band energies add up to the power of exactly the consumed bins."""
        rng = np.random.default_rng(7)
        window = rng.normal(0, 5000, FFT_SIZE)
        energies, _ = self.analyzer.analyze(window)
        spectrum = np.fft.rfft(window)
        power = np.abs(spectrum) ** 2
        assert energies.sum() == pytest.approx(power[2:512].sum(), rel=1e-9)

    def test_440hz_peaks_in_fourth_band(self):
        """Bin 440 * 2048 / 44100 ~ 20 lies in the (16, 32) band."""
        energies, _ = self.analyzer.analyze(tone(440))
        assert int(np.argmax(energies)) == 3
        assert energies[3] > 0.9 * energies.sum()

    def test_higher_tone_higher_band(self):
        low, _ = self.analyzer.analyze(tone(440))
        high, _ = self.analyzer.analyze(tone(3520))
        assert np.argmax(high) == np.argmax(low) + 3

    def test_silence(self):
        energies, stat = self.analyzer.analyze(np.zeros(FFT_SIZE))
        assert not energies.any()
        assert stat == 0.0

    def test_statistic_is_rms_over_end_bin(self):
        energies, stat = self.analyzer.analyze(tone(1000))
        assert stat == pytest.approx(np.sqrt(energies.sum() / 512))

    def test_quiet_signal_lower_than_loud(self):
        _, loud = self.analyzer.analyze(tone(1000, 20000))
        _, quiet = self.analyzer.analyze(tone(1000, 2000))
        assert quiet == pytest.approx(loud / 10, rel=1e-6)


class TestBandLevels:
    """Test the energy to level mapping."""

    def test_formula(self):
        levels = band_levels(np.array([10000.0 ** 2]), 100.0, 50.0, 240)
        # 50 * sqrt(10000 / 100) = 500 -> clamped
        assert levels[0] == 239

    def test_mid_value(self):
        levels = band_levels(np.array([400.0 ** 2]), 100.0, 50.0, 240)
        assert levels[0] == 100

    def test_silence_is_zero(self):
        assert band_levels(np.zeros(8), 1.0, 50.0, 240).tolist() == [0] * 8

    def test_truncates(self):
        # 3 * sqrt(sqrt(81) / 1) = 9 ; 3 * sqrt(sqrt(80)) = 8.97
        assert band_levels(np.array([81.0, 80.0]), 1.0, 3.0, 10).tolist() == [9, 8]

    def test_gain_invariance(self):
        """Scaling energy by a^2 and gain by a leaves the level unchanged."""
        e = np.array([1e6, 4e8, 9e10])
        assert band_levels(e, 50.0, 50.0, 240).tolist() == band_levels(e * 1e4, 5000.0, 50.0, 240).tolist()
