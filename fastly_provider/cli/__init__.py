from .commands import cli_start

__all__ = ["cli_start"]
