"""cwtail - tail and follow CloudWatch Logs log groups."""

__version__ = "1.0.0"
