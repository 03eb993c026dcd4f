"""Heart transplant donor/recipient matching by Predicted Heart Mass."""

__version__ = "1.0.0"
