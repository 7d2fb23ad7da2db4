"""
Optional fetch layer.

The derivation itself never touches the network. ``fetch_client`` is a
convenience that downloads the home page and the ondemand script through any
object with a ``get(url, headers)`` method and hands the text to
:meth:`ClientTransaction.from_pages`.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

import httpx
from curl_cffi import requests

from .config import Settings
from .errors import HttpError, HttpStatusError
from .extractor import extract_ondemand_url
from .signature import Clock, ClientTransaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    status: int
    body: str


class Transport(Protocol):
    def get(self, url: str, headers: Dict[str, str]) -> Response:
        ...


class CurlTransport:
    """curl_cffi session impersonating a desktop browser."""

    def __init__(
        self,
        impersonate: str = "chrome124",
        proxy: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.session = requests.Session(impersonate=impersonate)
        if proxy:
            self.session.proxies = {"all": proxy}
        self.timeout = timeout

    def get(self, url: str, headers: Dict[str, str]) -> Response:
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestsError as e:
            raise HttpError(str(e)) from e
        return Response(status=resp.status_code, body=resp.text)

    def close(self) -> None:
        self.session.close()


class HttpxTransport:
    """Plain httpx client, for callers that already run one."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = 30.0):
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def get(self, url: str, headers: Dict[str, str]) -> Response:
        try:
            resp = self.client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise HttpError(str(e)) from e
        return Response(status=resp.status_code, body=resp.text)

    def close(self) -> None:
        self.client.close()


def default_transport(settings: Settings) -> CurlTransport:
    return CurlTransport(
        impersonate=settings.impersonate,
        proxy=settings.proxy,
        timeout=settings.timeout,
    )


def fetch_text(transport: Transport, url: str, headers: Dict[str, str]) -> str:
    logger.debug(f"GET {url}")
    resp = transport.get(url, headers)
    if resp.status != 200:
        logger.warning(f"{url} returned HTTP {resp.status}")
        raise HttpStatusError(resp.status, url, resp.body)
    return resp.body


def fetch_pages(
    transport: Optional[Transport] = None,
    settings: Optional[Settings] = None,
):
    """Download the home page and its ondemand script.

    Returns ``(home_page_html, ondemand_js)``.
    """
    settings = settings or Settings.from_env()
    owned = transport is None
    transport = transport or default_transport(settings)
    headers = settings.headers()

    try:
        home_html = fetch_text(transport, settings.home_url, headers)
        ondemand_url = extract_ondemand_url(home_html, settings.ondemand_base_url)
        ondemand_js = fetch_text(transport, ondemand_url, headers)
    finally:
        if owned:
            transport.close()

    logger.info(
        "Fetched home page and ondemand script",
        extra={"extra": {"html_length": len(home_html), "js_length": len(ondemand_js)}},
    )
    return home_html, ondemand_js


def fetch_client(
    transport: Optional[Transport] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> ClientTransaction:
    """Fetch x.com and return a ready-to-use :class:`ClientTransaction`."""
    home_html, ondemand_js = fetch_pages(transport, settings)
    return ClientTransaction.from_pages(home_html, ondemand_js, clock=clock)
