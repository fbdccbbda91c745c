"""DepSentinel — dependency consistency checks for workspace repositories."""

__version__ = "0.3.0"
