import time
from email.utils import formatdate

from fastapi import APIRouter
from fastapi.responses import JSONResponse, RedirectResponse

from webshare_stremio.constants import LINK_CACHE_SECONDS, cloudflare_cache_headers
from webshare_stremio.errors import ProviderError
from webshare_stremio.logger import logger
from webshare_stremio.services import webshare

router = APIRouter()


def link_cache_headers(now: float) -> dict:
    return {
        'Expires': formatdate(now + LINK_CACHE_SECONDS, usegmt=True),
        'Last-Modified': formatdate(now, usegmt=True),
        'Cache-Control': f'max-age={LINK_CACHE_SECONDS}, must-revalidate, proxy-revalidate',
    }


@router.get('/getUrl/{ident}')
async def get_url(ident: str, token: str = ""):
    """Redirect the player to a fresh Webshare download link."""
    try:
        async with webshare.create_client() as client:
            url = await client.get_link(ident, token)
    except ProviderError as exc:
        logger.warning(f"file_link for {ident} failed: {exc}")
        url = None

    if not url:
        return JSONResponse(content={"error": "Link not available"}, status_code=404, headers=cloudflare_cache_headers)
    return RedirectResponse(url, status_code=302, headers=link_cache_headers(time.time()))
