from .main import cli_start
from .reconcile import apply, plan
from .schema import schema
from .version import version

__all__ = [
    "cli_start",
    "apply",
    "plan",
    "schema",
    "version",
]
