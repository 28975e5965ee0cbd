"""component-logger: degrading asynchronous logging for UI components."""

__version__ = "0.1.0"
