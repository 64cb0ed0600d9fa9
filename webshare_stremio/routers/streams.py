from fastapi import APIRouter
from fastapi.responses import JSONResponse

from webshare_stremio.constants import cloudflare_cache_headers
from webshare_stremio.errors import AddonError
from webshare_stremio.logger import logger
from webshare_stremio.models import MediaType, SearchConfig
from webshare_stremio.services import metadata, webshare
from webshare_stremio.services.search import playback_url, search_streams
from webshare_stremio.settings import settings
from webshare_stremio.utils import decode_user_config, parse_webshare_id

router = APIRouter()


def _empty() -> JSONResponse:
    return JSONResponse(content={"streams": []}, headers=cloudflare_cache_headers)


@router.get('/{user_config}/stream/{media_type}/{media_id}.json')
async def get_streams(user_config: str, media_type: str, media_id: str):
    """Ranked Webshare streams for an IMDb/TMDB id, or the direct stream of a Webshare file."""
    try:
        kind = MediaType(media_type)
    except ValueError:
        return _empty()

    try:
        config = decode_user_config(user_config)
        ident = parse_webshare_id(media_id)
        async with webshare.create_client() as client:
            if ident:
                token = await webshare.get_token(client, config)
                stream = {"url": playback_url(ident, token, settings.base_url), "name": "Webshare"}
                return JSONResponse(content={"streams": [stream]}, headers=cloudflare_cache_headers)

            if not (media_id.startswith("tt") or media_id.startswith("tmdb:")):
                return _empty()

            descriptor = await metadata.create_resolver().describe(kind, media_id)
            if not descriptor:
                logger.info(f"No metadata for {media_type}/{media_id}")
                return _empty()

            token = await webshare.get_token(client, config)
            search_config = SearchConfig.from_user_config(config, settings.default_sort_method)
            results = await search_streams(descriptor, client, token, search_config)
    except AddonError as exc:
        logger.warning(f"Streams for {media_type}/{media_id} failed: {exc}")
        return _empty()
    except Exception:
        logger.exception(f"Unexpected error while serving streams for {media_type}/{media_id}")
        return _empty()

    return JSONResponse(content={"streams": [item.to_stremio() for item in results]}, headers=cloudflare_cache_headers)
