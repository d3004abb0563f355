"""Practice environment for resolving data stream mapping conflicts."""

__version__ = "0.1.0"
