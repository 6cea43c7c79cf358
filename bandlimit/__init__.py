"""Bandlimited interpolation sample-rate converter for 16-bit PCM audio."""

__version__ = "0.1.0"
