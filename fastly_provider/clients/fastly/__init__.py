from .client import FastlyClient

__all__ = ["FastlyClient"]
