"""bedarrange - multi-bed arrangement of printable and unprintable parts."""

__version__ = "0.1.0"
