# referent/scraper.py
"""
requests-based page fetcher.

Sends a desktop-browser request signature and enforces a wall-clock bound on
the whole fetch, not only on individual socket operations. The request runs in
a worker thread; the caller waits on it in short slices and, once the deadline
passes or the caller cancels, closes the response and returns immediately.
No retries here: the caller decides what to do with a retryable failure.
"""

import logging
import threading
import time
from contextlib import closing
from typing import Optional

import requests
from bs4 import UnicodeDammit
from urllib3.exceptions import ReadTimeoutError

from .config import ACCEPT_LANGUAGE, FETCH_TIMEOUT, USER_AGENT
from .errors import (
    ExtractionError,
    FetchCancelled,
    FetchTimeout,
    InvalidInput,
    NetworkError,
    UpstreamHttpError,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

CHUNK_SIZE = 8 * 1024
POLL_INTERVAL = 0.05


def browser_headers() -> dict:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
        "Accept-Language": ACCEPT_LANGUAGE,
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Ch-Ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
        "Sec-Ch-Ua-Mobile": "?0",
        "Sec-Ch-Ua-Platform": '"Windows"',
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Upgrade-Insecure-Requests": "1",
    }


def _is_timeout(exc) -> bool:
    if isinstance(exc, requests.exceptions.Timeout):
        return True
    # read timeouts while streaming arrive as ConnectionError(ReadTimeoutError)
    cause = exc.args[0] if exc.args else None
    return isinstance(cause, ReadTimeoutError) or isinstance(exc.__context__, ReadTimeoutError)


def _transport_error(url, exc):
    if isinstance(exc, (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
                        requests.exceptions.InvalidSchema)):
        return InvalidInput(f"{url}: {exc}")
    if _is_timeout(exc):
        return FetchTimeout(f"{url}: {exc}")
    return NetworkError(f"{url}: {exc}")


def _decode(body: bytes, declared) -> str:
    dammit = UnicodeDammit(body, [declared] if declared else [], is_html=True)
    if dammit.unicode_markup is None:
        return body.decode("utf-8", errors="replace")
    return dammit.unicode_markup


class _Download:
    """One GET, run on a worker thread; the waiting caller may abort it."""

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout
        self.done = threading.Event()
        self.aborted = threading.Event()
        self.resp = None
        self.body = None
        self.declared = None
        self.error = None

    def run(self):
        try:
            self.resp = requests.get(
                self.url,
                headers=browser_headers(),
                timeout=self.timeout,
                stream=True,
                allow_redirects=True,
            )
            with closing(self.resp):
                self._read(self.resp)
        except Exception as e:
            # handed over to the waiting caller
            self.error = e
        finally:
            self.done.set()

    def _read(self, resp):
        if self.aborted.is_set():
            return
        if not 200 <= resp.status_code < 300:
            raise UpstreamHttpError(resp.status_code)

        chunks = []
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            if self.aborted.is_set():
                return
            chunks.append(chunk)

        declared = requests.utils.get_encoding_from_headers(resp.headers)
        if declared and "charset" not in (resp.headers.get("content-type") or "").lower():
            # requests falls back to ISO-8859-1 for text/*; let the markup decide
            declared = None
        self.declared = declared
        self.body = b"".join(chunks)

    def abort(self):
        self.aborted.set()
        resp = self.resp
        if resp is not None:
            try:
                resp.close()
            except Exception as e:
                logger.debug("closing aborted response for %s failed: %s", self.url, e)


def fetch_url(url: str, timeout: Optional[float] = None, cancel: Optional[threading.Event] = None) -> str:
    """
    GET url and return the decoded HTML.

    timeout bounds the whole fetch (connect, headers and download). cancel is
    an optional threading.Event; once set, the request is abandoned.

    Raises FetchTimeout, NetworkError, UpstreamHttpError, InvalidInput or
    FetchCancelled.
    """
    timeout = FETCH_TIMEOUT if timeout is None else timeout
    if cancel is not None and cancel.is_set():
        raise FetchCancelled(f"{url}: cancelled by caller")

    deadline = time.monotonic() + timeout
    logger.info("fetch_url: GET %s (timeout=%.1fs)", url, timeout)

    download = _Download(url, timeout)
    worker = threading.Thread(target=download.run, name="fetch_url", daemon=True)
    worker.start()

    while not download.done.wait(POLL_INTERVAL):
        if cancel is not None and cancel.is_set():
            logger.info("fetch_url: cancelled %s", url)
            download.abort()
            raise FetchCancelled(f"{url}: cancelled by caller")
        if time.monotonic() >= deadline:
            logger.warning("fetch_url: %s exceeded %.1fs", url, timeout)
            download.abort()
            raise FetchTimeout(f"{url}: exceeded {timeout}s")

    err = download.error
    if isinstance(err, ExtractionError):
        logger.warning("fetch_url: %s failed: %s", url, err)
        raise err
    if isinstance(err, requests.exceptions.RequestException):
        logger.warning("fetch_url: request to %s failed: %s", url, err)
        raise _transport_error(url, err) from err
    if err is not None:
        raise err

    return _decode(download.body, download.declared)
