"""EOS: rules engine and authoritative game service for the EOS board game."""

__version__ = "0.1.0"
