from fastapi import APIRouter
from fastapi.responses import JSONResponse

from webshare_stremio.constants import cloudflare_cache_headers
from webshare_stremio.errors import AddonError
from webshare_stremio.logger import logger
from webshare_stremio.models import StreamResult
from webshare_stremio.services import webshare
from webshare_stremio.services.filename_parser import extract_language
from webshare_stremio.utils import decode_user_config, parse_webshare_id

router = APIRouter()


@router.get('/{user_config}/meta/{media_type}/{media_id}.json')
async def get_meta(user_config: str, media_type: str, media_id: str):
    """Catalog item details for a ``webshare:<ident>`` id."""
    ident = parse_webshare_id(media_id)
    if not ident:
        return JSONResponse(content={"meta": {}}, headers=cloudflare_cache_headers)

    try:
        config = decode_user_config(user_config)
        async with webshare.create_client() as client:
            token = await webshare.get_token(client, config)
            details = await client.get_details(ident, token)
    except AddonError as exc:
        logger.warning(f"Meta for {media_id} failed: {exc}")
        return JSONResponse(content={"meta": {}}, headers=cloudflare_cache_headers)

    if not details:
        return JSONResponse(content={"meta": {}}, headers=cloudflare_cache_headers)

    # Same summary lines as a stream, followed by the uploader's description
    summary = StreamResult(
        ident=ident,
        filename=details.filename,
        size=details.size,
        playback_url="",
        resolution_label="",
        binge_group_key="",
        pos_votes=details.pos_votes,
        neg_votes=details.neg_votes,
        language=extract_language(details.filename),
    ).description
    meta = {
        "id": media_id,
        "type": media_type,
        "name": details.filename,
        "poster": details.stripe,
        "background": details.stripe,
        "description": f"{summary}\n{details.description}".rstrip(),
        "website": f"https://webshare.cz/#/file/{ident}",
    }
    return JSONResponse(content={"meta": meta}, headers=cloudflare_cache_headers)
