from fastapi import APIRouter
from fastapi.responses import JSONResponse

from webshare_stremio.constants import ID_PREFIX, catalog_cache_headers, cloudflare_cache_headers
from webshare_stremio.errors import AddonError
from webshare_stremio.logger import logger
from webshare_stremio.services import webshare
from webshare_stremio.services.search import direct_search
from webshare_stremio.utils import decode_user_config

router = APIRouter()


@router.get('/{user_config}/catalog/{media_type}/{catalog_id}.json')
async def get_empty_catalog(user_config: str, media_type: str, catalog_id: str):
    # The direct catalog is search-only
    return JSONResponse(content={"metas": []}, headers=cloudflare_cache_headers)


@router.get('/{user_config}/catalog/{media_type}/{catalog_id}/search={query}.json')
async def search_catalog(user_config: str, media_type: str, catalog_id: str, query: str):
    """Plain Webshare search results as catalog items."""
    try:
        config = decode_user_config(user_config)
        async with webshare.create_client() as client:
            token = await webshare.get_token(client, config)
            files = await direct_search(query, client, token)
    except AddonError as exc:
        logger.warning(f"Catalog search for {query!r} failed: {exc}")
        return JSONResponse(content={"metas": []}, headers=cloudflare_cache_headers)

    metas = [
        {
            "id": f"{ID_PREFIX}{item.ident}",
            "name": item.name,
            "poster": item.img,
            "type": media_type,
        }
        for item in files
    ]
    return JSONResponse(content={"metas": metas}, headers=catalog_cache_headers)
