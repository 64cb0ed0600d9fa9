import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from webshare_stremio.constants import cloudflare_cache_headers
from webshare_stremio.logger import REQUEST_ID, setup_logging
from webshare_stremio.routers import catalog, configure, link, manifest, meta, streams
from webshare_stremio.settings import settings

setup_logging()
logger = logging.getLogger("webshare_stremio")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Started Webshare addon {settings.addon_version} at {settings.base_url}")
    yield
    logger.info("Shutdown")


app = FastAPI(title="Webshare.cz for Stremio", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
    token = REQUEST_ID.set(rid)
    try:
        response = await call_next(request)
    finally:
        REQUEST_ID.reset(token)
    response.headers["X-Request-ID"] = rid
    return response


# Include Routers
app.include_router(configure.router)
app.include_router(manifest.router)
app.include_router(link.router)
app.include_router(streams.router)
app.include_router(catalog.router)
app.include_router(meta.router)


# Health check
@app.get('/healthz')
async def healthz():
    return JSONResponse(content={"status": "ok", "version": settings.addon_version}, headers=cloudflare_cache_headers)
