import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol, Sequence, Tuple

import aiohttp
from aiohttp import ClientSession as Session
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from .. import __version__
from ..config import ApiConfig
from .rest import Gist, parse_listing

logger = logging.getLogger(__name__)


class Lister(Protocol):
    async def list_page(self, page: int) -> Sequence[Gist]: ...


class GistClient:
    def __init__(self, session: Session, url: str):
        self.session = session
        self.url = url

    async def list_page(self, page: int) -> Sequence[Gist]:
        logger.debug(f"GET {self.url}?page={page}")
        async with self.session.get(self.url, params={"page": page}) as resp:
            resp.raise_for_status()
            content = await resp.read()

        return parse_listing(content)


@asynccontextmanager
async def open_client(token: str, config: ApiConfig) -> AsyncIterator[GistClient]:
    headers = {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
        "User-Agent": f"gistbak/{__version__}",
    }
    # no timeout, a hung request blocks the run
    timeout = aiohttp.ClientTimeout(total=None)
    async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
        yield GistClient(session, config.url)


def _is_empty(gists: Sequence[Gist]) -> bool:
    return len(gists) == 0


def _log_empty(retry_state: RetryCallState) -> None:
    page = retry_state.args[0]
    logger.debug(f"page {page} is empty (attempt {retry_state.attempt_number})")


def _give_up(retry_state: RetryCallState) -> Sequence[Gist]:
    page = retry_state.args[0]
    logger.debug(f"page {page} stayed empty after {retry_state.attempt_number} attempts")
    return []


async def fetch_page(
    client: Lister,
    page: int,
    max_retries: int = 5,
    wait: float = 0.0,
) -> Sequence[Gist]:
    """Request one page, asking for the same page again while it is empty.

    An empty list means `max_retries` requests in a row came back empty.
    Request errors are not retried.
    """

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_fixed(wait),
        retry=retry_if_result(_is_empty),
        before_sleep=_log_empty,
        retry_error_callback=_give_up,
    )
    return await retrying(client.list_page, page)


async def iter_pages(
    client: Lister,
    max_retries: int = 5,
    wait: float = 0.0,
) -> AsyncIterator[Tuple[int, Sequence[Gist]]]:
    page = 1
    while True:
        gists = await fetch_page(client, page, max_retries, wait)
        if len(gists) == 0:
            logger.debug(f"no more gists after page {page - 1}")
            return
        yield page, gists
        page += 1
