"""Search package indexes from the command line with a local response cache."""

__version__ = "1.2.0"
