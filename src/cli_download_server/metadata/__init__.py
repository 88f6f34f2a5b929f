"""Bundled descriptor document."""
