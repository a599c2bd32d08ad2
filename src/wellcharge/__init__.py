"""wellcharge: wellness scoring and human-battery engine."""

__version__ = "0.1.0"
