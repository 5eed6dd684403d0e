from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    from endpoints.mcp_endpoints import mcp

    async with mcp.session_manager.run():
        yield


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from deep_storage.settings import get_settings
    from endpoints.items_endpoints import router as items_router
    from endpoints.mcp_endpoints import mcp

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    mcp.settings.streamable_http_path = "/"

    app = FastAPI(title="Deep Storage", lifespan=lifespan)

    @app.post("/mcp")
    async def mcp_redirect_post():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/mcp")
    async def mcp_redirect_get():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    app.include_router(items_router)

    app.mount("/mcp", mcp.streamable_http_app())

    return app


app = create_app()
