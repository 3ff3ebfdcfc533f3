"""Leave-time notifier: reminds you when your scheduled work day is over."""

__version__ = "0.1.0"
