"""GoDev - smart multi-language project compiler."""

__version__ = "1.0.0"
