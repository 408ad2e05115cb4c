"""Application layer: normalization, classification, sanitization, recovery."""
