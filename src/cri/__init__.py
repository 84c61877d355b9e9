"""Control the `sizes` attribute of responsive images per layout section."""

__version__ = "0.1.0"
