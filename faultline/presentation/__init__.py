"""Presentation layer: HTTP wire formats, exception handlers, middleware."""
