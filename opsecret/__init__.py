"""opsecret — resolve CI secret requests against a 1Password Connect server."""

__version__ = "0.1.0"
