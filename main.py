import uvicorn

from webshare_stremio.main import app  # noqa: F401

if __name__ == "__main__":
    uvicorn.run("webshare_stremio.main:app", host="0.0.0.0", port=61613, reload=False)
