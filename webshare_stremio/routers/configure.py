from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from webshare_stremio.constants import cloudflare_cache_headers
from webshare_stremio.errors import AuthenticationError
from webshare_stremio.logger import logger
from webshare_stremio.models import SortMethod
from webshare_stremio.services import webshare
from webshare_stremio.settings import settings
from webshare_stremio.utils import encode_user_config

router = APIRouter()


class ConfigureRequest(BaseModel):
    login: str
    password: str
    sortMethod: Optional[str] = None


@router.post('/configure')
async def configure(body: ConfigureRequest):
    """Salt the password, verify it with a login and return the install links."""
    login = body.login.strip()
    async with webshare.create_client() as client:
        try:
            salted = await client.salt_password(login, body.password)
            await client.login(login, salted)
        except AuthenticationError as exc:
            logger.warning(f"Configuration rejected for {login}: {exc}")
            raise HTTPException(status_code=401, detail="Cannot log in to Webshare.cz, invalid login credentials")

    sort_method = SortMethod.parse(body.sortMethod or settings.default_sort_method)
    encoded = encode_user_config({
        "login": login,
        "saltedPassword": salted,
        "sortMethod": sort_method.value,
    })
    content = {
        "config": encoded,
        "manifestUrl": f"{settings.base_url}/{encoded}/manifest.json",
        "installUrl": f"stremio://{settings.host}/{encoded}/manifest.json",
    }
    return JSONResponse(content=content, headers=cloudflare_cache_headers)
