"""Investment property projection and Australian tax engine."""

__version__ = "0.1.0"
