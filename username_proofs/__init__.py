"""Username discount claim-signature service."""

__version__ = "0.1.0"
