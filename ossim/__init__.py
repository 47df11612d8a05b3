"""Simulators of a two-pass linker, CPU and disk I/O scheduling, and paged virtual memory."""

__version__ = "0.1.0"