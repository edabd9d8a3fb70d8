"""Core components of b2upload: API access, sessions and the upload pipeline."""
