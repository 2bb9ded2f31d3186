"""Version-pinned Go toolchain installer and dispatcher."""

__version__ = "0.4.0"
