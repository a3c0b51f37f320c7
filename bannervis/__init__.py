"""Audio visualisations for an RGB LED banner fed by squeezelite's shared memory."""

__version__ = "0.4.0"
