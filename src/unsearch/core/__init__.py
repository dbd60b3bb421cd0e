"""Core search logic — filter compilers, option normalization and the in-memory engine."""
