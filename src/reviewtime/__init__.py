"""Measure GitHub pull request review latency."""

__version__ = "0.1.0"
