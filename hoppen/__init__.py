"""Hoppen -- scaffolds small static web sketches and serves them locally."""

__version__ = "0.3.0"
