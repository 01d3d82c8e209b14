import httpx
from loguru import logger

from fastly_provider.version import __version__

# Each reconciliation pass issues its requests one at a time
FASTLY_HTTP_MAX_CONNECTIONS_LIMIT = 10
FASTLY_HTTP_TIMEOUT = 60.0


def get_http_client(
    api_key: str, timeout: float = FASTLY_HTTP_TIMEOUT
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={
            "Fastly-Key": api_key,
            "Accept": "application/json",
            "User-Agent": f"fastly-provider/{__version__}",
        },
        timeout=httpx.Timeout(timeout),
        limits=httpx.Limits(max_connections=FASTLY_HTTP_MAX_CONNECTIONS_LIMIT),
    )


def handle_fastly_status_code(
    response: httpx.Response, should_raise: bool = True, should_log: bool = True
) -> None:
    if should_log and response.is_error:
        error_message = f"Request failed with status code: {response.status_code}, Error: {response.text}"
        if request_id := response.headers.get("fastly-request-id"):
            logger.bind(request_id=request_id).error(error_message)
        else:
            logger.error(error_message)
    if should_raise:
        response.raise_for_status()
