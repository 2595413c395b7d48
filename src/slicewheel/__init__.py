"""slicewheel: Graded slice wheels with consistent storage and radial layout."""

__version__ = "0.1.0"
