"""Plain HTTP(S) access used for directory lookups, feeds and audio files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger
from podscribe.core.retry_config import NO_RETRY, RetryConfig, create_retry_decorator

if TYPE_CHECKING:
    import aiohttp

    from podscribe.core.config import PodscribeConfig

logger = get_logger(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class HttpClient:
    """Small aiohttp wrapper: GET as text, and streamed GET to a file.

    Redirects are followed up to ``max_redirects`` hops; a longer chain is an
    error rather than an endless loop.
    """

    _provider_name = "http"

    def __init__(
        self,
        *,
        user_agent: str = "PodcastScraper/1.0",
        max_redirects: int = 10,
        lookup_timeout: float = 30.0,
        download_timeout: float = 600.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self._user_agent = user_agent
        self._max_redirects = max_redirects
        self._lookup_timeout = lookup_timeout
        self._download_timeout = download_timeout
        self._retry_config = retry_config or NO_RETRY
        self._logger = logger.bind(provider=self._provider_name)

    @classmethod
    def from_config(
        cls, config: PodscribeConfig, retry_config: RetryConfig | None = None
    ) -> HttpClient:
        return cls(
            user_agent=config.user_agent,
            max_redirects=config.max_redirects,
            lookup_timeout=config.lookup_timeout_seconds,
            download_timeout=config.media_timeout_seconds,
            retry_config=retry_config,
        )

    def _session(self, timeout: float) -> aiohttp.ClientSession:
        import aiohttp  # type: ignore[import]

        return aiohttp.ClientSession(
            headers={"User-Agent": self._user_agent},
            timeout=aiohttp.ClientTimeout(total=timeout),
        )

    async def fetch_text(self, url: str) -> str:
        """GET ``url`` and return the decoded body.

        Raises:
            ProviderError: On connection errors, timeouts, redirect loops or
                HTTP status >= 400.
        """
        operation_logger = self._logger.bind(url=url, operation="fetch_text")
        operation_logger.debug("fetch_started")
        try:
            async with (
                self._session(self._lookup_timeout) as session,
                session.get(
                    url, allow_redirects=True, max_redirects=self._max_redirects
                ) as response,
            ):
                if response.status >= 400:
                    raise ProviderError(
                        message=f"http fetch failed: HTTP {response.status}: {url}",
                        provider=self._provider_name,
                        retryable=500 <= response.status < 600,
                    )
                return await response.text(errors="replace")
        except ProviderError:
            raise
        except Exception as e:
            operation_logger.debug("fetch_failed", error=str(e), error_type=type(e).__name__)
            raise ProviderError(
                message=f"http fetch failed: {type(e).__name__}: {e}",
                provider=self._provider_name,
                retryable=isinstance(e, (ConnectionError, TimeoutError)),
            ) from e

    async def download_file(self, url: str, dest: Path) -> Path:
        """Stream ``url`` into ``dest``.

        Raises:
            ProviderError: On any non-200 final status or transport failure.
        """
        operation_logger = self._logger.bind(url=url, dest=str(dest), operation="download_file")
        operation_logger.info("download_started")

        import aiohttp  # type: ignore[import]

        transient: tuple[type[Exception], ...] = (
            aiohttp.ClientConnectionError,
            ConnectionError,
            TimeoutError,
        )
        retry_decorator = create_retry_decorator(
            config=self._retry_config,
            exception_types=transient,
        )

        @retry_decorator
        async def _download_with_retry() -> int:
            async with (
                self._session(self._download_timeout) as session,
                session.get(
                    url, allow_redirects=True, max_redirects=self._max_redirects
                ) as response,
            ):
                if response.status != 200:
                    raise ProviderError(
                        message=f"HTTP {response.status}",
                        provider=self._provider_name,
                        retryable=500 <= response.status < 600,
                    )
                written = 0
                with open(dest, "wb") as fh:
                    async for block in response.content.iter_chunked(DOWNLOAD_CHUNK_SIZE):
                        fh.write(block)
                        written += len(block)
                return written

        try:
            written = await _download_with_retry()
        except ProviderError:
            dest.unlink(missing_ok=True)
            raise
        except Exception as e:
            dest.unlink(missing_ok=True)
            operation_logger.error("download_failed", error=str(e), error_type=type(e).__name__)
            raise ProviderError(
                message=f"Download failed: {type(e).__name__}: {e}",
                provider=self._provider_name,
                retryable=isinstance(e, transient),
            ) from e

        operation_logger.info("download_completed", bytes_written=written)
        return dest
