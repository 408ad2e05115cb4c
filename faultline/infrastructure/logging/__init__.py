"""Logging adapters implementing LoggerProtocol."""

from faultline.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
