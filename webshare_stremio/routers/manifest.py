import copy

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from webshare_stremio.constants import cloudflare_cache_headers, manifest as base_manifest
from webshare_stremio.settings import settings

router = APIRouter()


def build_manifest(configured: bool = False) -> dict:
    manifest = copy.deepcopy(base_manifest)
    manifest['version'] = settings.addon_version
    if configured:
        # Credentials are already in the URL, Stremio may install directly
        manifest['behaviorHints']['configurationRequired'] = False
    return manifest


@router.get('/manifest.json')
async def get_manifest():
    return JSONResponse(content=build_manifest(), headers=cloudflare_cache_headers)


@router.get('/{user_config}/manifest.json')
async def get_configured_manifest(user_config: str):
    return JSONResponse(content=build_manifest(configured=True), headers=cloudflare_cache_headers)
