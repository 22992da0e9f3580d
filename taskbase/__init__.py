"""Callbacks, task runners, message loops, thread pools, weak pointers, timing and trace-event records."""

__version__ = "0.1.0"