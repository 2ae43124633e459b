"""kubegather: filtered container log collection for diagnostic archives."""

__version__ = "0.1.0"
