"""MultiTimer — several named countdown timers sharing one alarm."""

__version__ = "0.1.0"
