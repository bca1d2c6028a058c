"""relpub — release artifact repacker and object-store publisher."""

__version__ = "1.0.0"
