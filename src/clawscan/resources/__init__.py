"""Bundled data files for ClawScan."""
