"""HTTP gateway, chat-server selection, pooled Redis store and INI config for a chat backend."""

__version__ = "0.1.0"