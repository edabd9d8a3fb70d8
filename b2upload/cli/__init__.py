"""Command line interface for b2upload."""
