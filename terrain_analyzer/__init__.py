"""Route terrain and difficulty analysis."""

__version__ = "0.1.0"
