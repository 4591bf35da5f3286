import ipaddress
import logging
import threading
import webbrowser

logger = logging.getLogger(__name__)

OPEN_DELAY_SEC = 0.25


def browser_host(host: str) -> str:
    """Host to put in a URL for a server bound to ``host``."""
    h = (host or '').strip()
    if not h:
        return '127.0.0.1'
    try:
        if ipaddress.ip_address(h).is_unspecified:
            return '127.0.0.1'
    except ValueError:
        pass
    return h


def server_url(host: str, port: int) -> str:
    h = browser_host(host)
    if ':' in h:
        h = f"[{h}]"
    return f"http://{h}:{port}"


def _open(url: str) -> None:
    try:
        if not webbrowser.open(url):
            logger.warning(f"[browser] no browser available for {url}")
    except webbrowser.Error as exc:
        logger.warning(f"[browser] failed to open {url}: {exc}")


def open_browser_later(url: str, delay: float = OPEN_DELAY_SEC) -> threading.Timer:
    """Open ``url`` shortly after the server starts listening."""
    timer = threading.Timer(delay, _open, args=(url,))
    timer.daemon = True
    timer.start()
    return timer
