"""Runtime configuration.

Values come from environment variables with sane defaults, so the same
scripts run unchanged on the banner controller and on a development box.
"""

import os

# Shared memory file published by squeezelite (-v option), named after the player MAC
SHM_PATH = os.environ.get("BANNERVIS_SHM", "/dev/shm/squeezelite-00:21:00:02:cc:45")

# LED banner geometry
WIDTH = int(os.environ.get("BANNERVIS_WIDTH", "80"))
HEIGHT = int(os.environ.get("BANNERVIS_HEIGHT", "8"))

# Audio ring buffer (must match squeezelite's VIS_BUF_SIZE)
VIS_BUF_SIZE = 16384  # int16 entries, interleaved L/R
CHANNELS = 2

# FFT parameters
FFT_SIZE = int(os.environ.get("BANNERVIS_FFT_SIZE", "2048"))  # ~46ms at 44.1kHz

# Auto-gain: running average divisor, ~1.5s at ~43 frames/s
GAIN_TAU = float(os.environ.get("BANNERVIS_GAIN_TAU", "64"))
GAIN_FLOOR = 1e-9  # keeps intensity formulas finite on long silence

# Spectrogram: scrolling history plus a bar chart on the right
SPECTROGRAM_COLORS = 240
SPECTROGRAM_K = 50.0
BARS_SIZE = 16

# Linear spectrum
SPECTRUM_COLORS = 180
SPECTRUM_K = 3.0
SPECTRUM_FIRST_BIN = 2  # ~43 Hz at 2048/44.1kHz

# VU meter
VU_RMS_PER_STEP = 181.0  # sample RMS units per lit pixel
VU_PEAK_HOLD = 50  # ticks before the peak marker starts falling
VU_SMOOTH_TAU = 2.0

# Waveform modes
WAVE_SAMPLES_PER_COLUMN = 32
WAVE_COLOR = (10, 20, 30)
GLOW_SAMPLES_PER_COLUMN = 16
GLOW_MATCH_STEP = 8  # correlate every 8th sample
GLOW_SCALE = 3.0
GLOW_PALETTE = os.environ.get("BANNERVIS_PALETTE", "glow")  # glow, hue or random
GLOW_HUE = float(os.environ.get("BANNERVIS_HUE", "0.33"))  # 0..1, for the hue palette

# Poll interval between ticks (seconds)
POLL_INTERVAL = 0.001
VU_POLL_INTERVAL = 0.010
WAVE_POLL_INTERVAL = 0.005

LOG_LEVEL = os.environ.get("BANNERVIS_LOG_LEVEL", "INFO")
