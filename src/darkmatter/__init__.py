"""Dark Matter - simple vault CLI utility with GPG encryption."""

__version__ = "1.0.0"
