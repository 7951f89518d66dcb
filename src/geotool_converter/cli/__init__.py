"""Command-line interface for geotool_converter."""
