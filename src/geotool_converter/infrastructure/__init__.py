"""Adapters that talk to processes, files and the watch service."""
