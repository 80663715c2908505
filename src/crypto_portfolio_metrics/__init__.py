"""Investment metrics and scenario valuations for a crypto portfolio."""

__version__ = "0.1.0"
