"""slidereel: renders slide data into short recorded animations."""

__version__ = "1.0.0"
