"""On-demand URL health checks for a domain's configured paths."""

import logging
import socket
import threading
import time
from collections.abc import Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3 import HTTPConnectionPool, HTTPSConnectionPool

from .config import AppSettings
from .models import CheckOutcome, URLStatus

logger = logging.getLogger(__name__)

# Upper bound for a single check, measured from the start of the first
# request and covering every redirect hop. A status request runs its checks
# one after another, so a dead domain costs roughly len(paths) * this value.
CHECK_TIMEOUT_SECONDS = 0.8

# Redirect hops followed before giving up; requests alone would allow 30.
MAX_REDIRECTS = 10

USER_AGENT = "URLHealth/0.1"


class _DeadlineExceeded(Exception):
    """Raised when a check runs past its deadline."""
    pass


class _ConnectionWatch:
    """Connections used by one check, shut down when its deadline passes.

    Socket timeouts only bound each individual read, so a server that
    trickles its status line and headers would otherwise hold a check open
    indefinitely. Shutting the socket down unblocks the pending read.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: list = []
        self.expired = False

    def add(self, conn) -> None:
        with self._lock:
            self._connections.append(conn)
            if self.expired:
                _shutdown_connection(conn)

    def expire(self) -> None:
        with self._lock:
            self.expired = True
            for conn in self._connections:
                _shutdown_connection(conn)


def _shutdown_connection(conn) -> None:
    sock = getattr(conn, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Already closed by the peer or by the owning thread.
        pass


class _WatchedPoolMixin:
    """Reports every connection the pool hands out to the pool's watch."""

    watch: _ConnectionWatch | None = None

    def _get_conn(self, timeout=None):
        conn = super()._get_conn(timeout=timeout)
        if self.watch is not None:
            self.watch.add(conn)
        return conn


class _WatchedHTTPConnectionPool(_WatchedPoolMixin, HTTPConnectionPool):
    pass


class _WatchedHTTPSConnectionPool(_WatchedPoolMixin, HTTPSConnectionPool):
    pass


_WATCHED_POOL_CLASSES = {
    "http": _WatchedHTTPConnectionPool,
    "https": _WatchedHTTPSConnectionPool,
}


class _DeadlineAdapter(HTTPAdapter):
    """Transport adapter whose connections are registered with a watch."""

    def __init__(self, watch: _ConnectionWatch) -> None:
        # init_poolmanager runs inside HTTPAdapter.__init__
        self.watch = watch
        super().__init__(max_retries=0)

    def init_poolmanager(self, *args, **kwargs) -> None:
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = dict(_WATCHED_POOL_CLASSES)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        manager.pool_classes_by_scheme = dict(_WATCHED_POOL_CLASSES)
        return manager

    def get_connection_with_tls_context(self, *args, **kwargs):
        return self._watched(super().get_connection_with_tls_context(*args, **kwargs))

    def get_connection(self, *args, **kwargs):
        return self._watched(super().get_connection(*args, **kwargs))

    def _watched(self, pool):
        pool.watch = self.watch
        return pool


def _is_success_status(status_code: int) -> bool:
    """2xx and 3xx count as reachable."""
    return 200 <= status_code < 400


def _fetch_status(session: requests.Session, url: str, deadline: float) -> int:
    """GET url, following redirects by hand, and return the final status code.

    Each hop gets only the time left before the deadline as its socket
    timeout. Bodies are never read.

    Raises:
        _DeadlineExceeded: If the deadline passes before a hop starts.
        requests.RequestException: On any transport failure.
    """
    for _ in range(MAX_REDIRECTS + 1):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise _DeadlineExceeded()

        with session.get(
            url,
            timeout=remaining,
            stream=True,
            allow_redirects=False,
            headers={"User-Agent": USER_AGENT},
        ) as response:
            target = session.get_redirect_target(response)
            if target is None:
                return response.status_code
            url = urljoin(response.url, target)
            logger.debug("Redirected to %s", url)

    raise requests.TooManyRedirects(f"Exceeded {MAX_REDIRECTS} redirects.")


def check_url(url: str, timeout: float = CHECK_TIMEOUT_SECONDS) -> CheckOutcome:
    """Perform a single HTTP GET and classify the outcome.

    Redirects are followed and the final status code is classified. The
    whole exchange, redirects included, must finish within ``timeout``
    seconds of the start of the first request. The response body is never
    read; connections are released on every path.

    Args:
        url: Fully-qualified URL to request.
        timeout: Total time allowed for the check, in seconds.

    Returns:
        CheckOutcome: ok for 200-399, http_error for any other code,
        transport_error when no final response arrived in time.
    """
    logger.info("Checking %s", url)

    deadline = time.monotonic() + timeout
    watch = _ConnectionWatch()
    watchdog = threading.Timer(timeout, watch.expire)
    watchdog.name = "check-deadline"
    watchdog.daemon = True

    try:
        with requests.Session() as session:
            adapter = _DeadlineAdapter(watch)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            watchdog.start()
            status_code = _fetch_status(session, url, deadline)
    except _DeadlineExceeded:
        outcome = CheckOutcome.transport_error(_timeout_message(url, timeout))
    except requests.RequestException as e:
        outcome = _transport_outcome(url, timeout, watch, str(e))
    except Exception as e:
        logger.debug("Unexpected error checking %s", url, exc_info=True)
        outcome = _transport_outcome(url, timeout, watch, str(e) or type(e).__name__)
    else:
        if _is_success_status(status_code):
            outcome = CheckOutcome.ok()
        else:
            outcome = CheckOutcome.http_error(status_code)
    finally:
        watchdog.cancel()

    if outcome.is_ok:
        logger.info("%s -> %s", url, outcome.render())
    else:
        logger.warning("%s -> %s", url, outcome.render())
    return outcome


def _timeout_message(url: str, timeout: float) -> str:
    return f"Get {url}: timed out after {timeout:g}s"


def _transport_outcome(url: str, timeout: float, watch: _ConnectionWatch, message: str) -> CheckOutcome:
    """A failure caused by the watchdog closing the socket is reported as a timeout."""
    if watch.expired:
        return CheckOutcome.transport_error(_timeout_message(url, timeout))
    return CheckOutcome.transport_error(message)


def build_url(domain: str, path: str) -> str:
    """Join a bare domain and a path suffix into an https URL."""
    return f"https://{domain}{path}"


def aggregate(
    domain: str,
    settings: AppSettings,
    checker: Callable[[str], CheckOutcome] = check_url,
) -> list[URLStatus]:
    """Check every configured path for a domain, in configured order.

    Checks run sequentially on the calling thread. The domain is not
    validated; a malformed one surfaces as an "ERROR: ..." status.

    Args:
        domain: Bare hostname without scheme.
        settings: Loaded settings providing the path suffixes.
        checker: Function performing one check.

    Returns:
        One URLStatus per configured path, in the same order.
    """
    statuses: list[URLStatus] = []
    for path in settings.paths:
        full_url = build_url(domain, path)
        outcome = checker(full_url)
        statuses.append(URLStatus(url=full_url, status=outcome.render()))
    return statuses
