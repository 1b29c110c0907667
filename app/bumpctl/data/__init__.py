"""Bundled data files for bumpctl."""
