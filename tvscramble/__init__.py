"""Videocrypt, Videocrypt S, VITC and WSS data encoders for analogue television lines."""

__version__ = "0.1.0"
__all__ = ["vbicode", "videocrypt", "videocrypts", "vitc", "wss"]