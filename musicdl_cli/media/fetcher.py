"""
Fetches remote binary content (cover images, metadata) into memory over HTTP.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp

from musicdl_cli.exceptions import FetchError, MusicDlError

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_loop: asyncio.AbstractEventLoop | None = None
_pool_lock: asyncio.Lock | None = None


def _bind_to_running_loop() -> asyncio.Lock:
    """
    Returns the pool lock of the running event loop.

    A session belongs to the loop that created it, so a pool left behind by an
    earlier loop (a previous ``asyncio.run``) is dropped rather than reused.
    """
    global _connection_pool, _pool_loop, _pool_lock
    loop = asyncio.get_running_loop()
    if _pool_loop is not loop:
        if _connection_pool is not None:
            log.debug("Dropping fetch connection pool of a finished event loop.")
        _connection_pool = None
        _pool_loop = loop
        _pool_lock = asyncio.Lock()
    return _pool_lock


async def get_connection_pool() -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for fetches.

    Only one connection pool exists per running event loop.
    """
    global _connection_pool
    async with _bind_to_running_loop():
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=16,
            ttl_dns_cache=600,  # 10 minutes
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug("Created fetch connection pool.")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _bind_to_running_loop():
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared fetch connection pool closed.")


async def fetch_buffer(url: str) -> bytes:
    """
    Downloads ``url`` into memory in a single attempt.

    Raises:
        FetchError: On a non-2xx response or any transport failure. No partial
        buffer is ever returned.
    """
    session = await get_connection_pool()
    try:
        async with session.get(url, allow_redirects=True) as response:
            if response.status >= 400:
                raise FetchError(
                    f"GET {url} returned HTTP {response.status} {response.reason}"
                )
            return await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(f"GET {url} failed: {e}") from e


async def save_buffer(buffer: bytes, destination_path: str | os.PathLike) -> None:
    """Writes a fetched buffer to disk."""
    try:
        async with aiofiles.open(destination_path, "wb") as f:
            await f.write(buffer)
    except OSError as e:
        raise MusicDlError(
            f"Could not write '{os.fspath(destination_path)}': {e}", kind="write"
        ) from e
    log.debug(f"Saved {len(buffer)} bytes to '{os.fspath(destination_path)}'")
