"""Async client for the Webshare.cz XML API."""

from __future__ import annotations

import hashlib
import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

import httpx
from passlib.hash import md5_crypt

from webshare_stremio.constants import webshare_headers
from webshare_stremio.errors import AuthenticationError, ProviderError
from webshare_stremio.models import FileDetails, RawCandidate
from webshare_stremio.services.provider import SearchProvider
from webshare_stremio.settings import settings

log = logging.getLogger("webshare_stremio.webshare")

SEARCH_LIMIT = 100


def _text(node: ET.Element, tag: str) -> Optional[str]:
    child = node.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _int(node: ET.Element, tag: str) -> int:
    value = _text(node, tag)
    try:
        return int(value) if value else 0
    except ValueError:
        return 0


def _optional_int(node: ET.Element, tag: str) -> Optional[int]:
    return _int(node, tag) or None


def parse_response(body: bytes | str, *, require_ok: bool = True) -> ET.Element:
    """Parse a Webshare XML envelope and check its ``<status>``."""
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ProviderError(f"Malformed Webshare response: {exc}") from exc
    if require_ok:
        status = _text(root, "status")
        if status != "OK":
            message = _text(root, "message") or _text(root, "code") or status or "no status"
            raise ProviderError(f"Webshare returned {status}: {message}")
    return root


def parse_file(node: ET.Element) -> Optional[RawCandidate]:
    ident = _text(node, "ident")
    name = _text(node, "name")
    if not ident or not name:
        return None
    return RawCandidate(
        ident=ident,
        name=name,
        size=_int(node, "size"),
        pos_votes=_int(node, "positive_votes"),
        neg_votes=_int(node, "negative_votes"),
        img=_text(node, "img"),
        protected=_text(node, "password") == "1",
    )


def parse_file_info(ident: str, root: ET.Element) -> Optional[FileDetails]:
    filename = _text(root, "name")
    size = _int(root, "size")
    if not filename or not size:
        log.info("file_info for %s is missing name or size", ident)
        return None
    return FileDetails(
        ident=ident,
        filename=filename,
        size=size,
        pos_votes=_int(root, "positive_votes"),
        neg_votes=_int(root, "negative_votes"),
        description=_text(root, "description") or "",
        stripe=_text(root, "stripe"),
        bitrate=_optional_int(root, "bitrate"),
        width=_optional_int(root, "width"),
        height=_optional_int(root, "height"),
        protected=_text(root, "password") == "1",
    )


class WebshareClient(SearchProvider):
    """Webshare.cz API over one ``httpx.AsyncClient``.

    Use as an async context manager, or pass an existing client whose
    lifetime the caller owns.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.webshare_api_base).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.request_timeout)

    async def __aenter__(self) -> "WebshareClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, endpoint: str, data: Dict[str, object]) -> bytes:
        url = f"{self.base_url}/{endpoint}/"
        try:
            resp = await self._client.post(url, data=data, headers=webshare_headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Webshare {endpoint} request failed: {exc}") from exc
        if resp.status_code != 200:
            raise ProviderError(f"Webshare {endpoint} returned HTTP {resp.status_code}", resp.status_code)
        return resp.content

    async def salt_password(self, user: str, password: str) -> str:
        """md5-crypt the password with the account salt, then SHA-1 hex it."""
        try:
            body = await self._post("salt", {"username_or_email": user})
            salt = _text(parse_response(body), "salt")
        except ProviderError as exc:
            raise AuthenticationError(f"Cannot get password salt for {user}: {exc}") from exc
        if not salt:
            raise AuthenticationError(f"Webshare returned no salt for {user}")
        crypted = md5_crypt.using(salt=salt).hash(password)
        return hashlib.sha1(crypted.encode("utf-8")).hexdigest()

    async def login(self, user: str, salted_password: str) -> str:
        log.info("Logging in user %s", user)
        data = {"username_or_email": user, "password": salted_password, "keep_logged_in": 1}
        try:
            root = parse_response(await self._post("login", data))
        except ProviderError as exc:
            raise AuthenticationError("Cannot log in to Webshare.cz, invalid login credentials") from exc
        token = _text(root, "token")
        if not token:
            raise AuthenticationError("Webshare.cz login returned no token")
        return token

    async def search(self, query: str, token: Optional[str]) -> List[RawCandidate]:
        log.info("Searching %r", query)
        data = {"what": query, "category": "video", "limit": SEARCH_LIMIT, "wst": token or ""}
        root = parse_response(await self._post("search", data))
        files = [parse_file(node) for node in root.findall("file")]
        return [item for item in files if item is not None]

    async def get_details(self, ident: str, token: Optional[str]) -> Optional[FileDetails]:
        body = await self._post("file_info", {"ident": ident, "wst": token or ""})
        root = parse_response(body, require_ok=False)
        if _text(root, "status") != "OK":
            log.info("file_info for %s returned %s", ident, _text(root, "status"))
            return None
        return parse_file_info(ident, root)

    async def get_link(self, ident: str, token: Optional[str]) -> Optional[str]:
        data = {"ident": ident, "download_type": "video_stream", "force_https": 1, "wst": token or ""}
        root = parse_response(await self._post("file_link", data), require_ok=False)
        if _text(root, "status") != "OK":
            log.warning("file_link for %s returned %s", ident, _text(root, "status"))
            return None
        return _text(root, "link")


def create_client() -> WebshareClient:
    return WebshareClient()


async def get_token(client: WebshareClient, config: dict) -> str:
    """Log in with the user config, salting a plain password when no salted one is stored."""
    login = (config.get("login") or "").strip()
    if not login:
        raise AuthenticationError("User config has no login")
    salted = config.get("saltedPassword")
    if not salted:
        password = config.get("password")
        if not password:
            raise AuthenticationError("User config has no password")
        salted = await client.salt_password(login, password)
    return await client.login(login, salted)
