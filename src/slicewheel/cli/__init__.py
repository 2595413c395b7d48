"""Command line interface for slicewheel."""
