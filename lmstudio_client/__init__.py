"""Async client for LM Studio's chat completion and embedding endpoints, with a chat command."""

__version__ = "0.1.2"