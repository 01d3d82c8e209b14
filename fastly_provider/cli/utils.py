import asyncio
import functools
from typing import Any, Callable, Coroutine, TypeVar

import click
import httpx
from pydantic import ValidationError

from fastly_provider.clients.fastly.client import FastlyClient
from fastly_provider.config.settings import FastlySettings
from fastly_provider.exceptions.base import BaseProviderException
from fastly_provider.exceptions.core import ConfigurationException

T = TypeVar("T")


def load_fastly_settings() -> FastlySettings:
    try:
        return FastlySettings()
    except ValidationError as e:
        raise ConfigurationException(
            f"Invalid Fastly settings, make sure FASTLY__API_KEY is set: {e}"
        ) from e


def get_fastly_client() -> FastlyClient:
    return FastlyClient.from_settings(load_fastly_settings())


def run_command(
    func: Callable[..., Coroutine[Any, Any, T]]
) -> Callable[..., T]:
    """Runs an async command and reports provider and API errors as a click failure"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return asyncio.run(func(*args, **kwargs))
        except httpx.HTTPStatusError as e:
            raise click.ClickException(
                f"Fastly API request failed with status {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise click.ClickException(f"Fastly API request failed: {e}") from e
        except BaseProviderException as e:
            raise click.ClickException(str(e)) from e

    return wrapper
