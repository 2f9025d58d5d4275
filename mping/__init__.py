"""Address resolution and IP version negotiation for multicast ping sessions."""

__version__ = "0.1.0"
