# file: farmstand/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farmstand.core import config
from farmstand.core.exceptions import register_exception_handlers
from farmstand.core.logger import setup_cloud_logging
from farmstand.core.rate_limit import register_rate_limiting

# ------------------------------
# Routers
# ------------------------------
from farmstand.MAP.google_maps import close_maps
from farmstand.MAP.map_routes import router as map_router
from farmstand.routers.directions import router as directions_router
from farmstand.VENDORS.vendor_routes import router as vendor_router

# Logging setup
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if setup_cloud_logging():
        logger.info("Google Cloud Logging enabled")
    yield
    await close_maps()


def create_app() -> FastAPI:
    app = FastAPI(title="Farm Stand Locator API", lifespan=lifespan)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten in prod if needed
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_rate_limiting(app)
    register_exception_handlers(app)

    app.include_router(vendor_router)
    app.include_router(map_router)
    app.include_router(directions_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
