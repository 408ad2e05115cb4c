"""Infrastructure adapters (logging, audit)."""
