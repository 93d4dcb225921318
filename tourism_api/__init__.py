"""Flask backend for a tourism destination catalogue with accounts, profiles and reviews."""

__version__ = "0.1.0"