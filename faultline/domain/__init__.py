"""Domain layer: ports and types for external collaborators."""
