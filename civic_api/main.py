"""FastAPI アプリケーション"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .errors import InvalidArgument
from .logger import setup_logging
from .routes.polling_places import router as polling_places_router
from .routes.news import router as news_router
from .services.catalog import get_catalog
from .services.location import get_location_provider
from .services.places import check_radius_preset

setup_logging()
logger = logging.getLogger(__name__)


def check_settings():
    """既定半径がプリセット外なら起動させない"""
    check_radius_preset(config.DEFAULT_RADIUS_M)


def _log_location(coordinate):
    logger.info(f"Location: updated to ({coordinate.latitude}, {coordinate.longitude})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """起動時に設定を検証し、カタログを読み込んでおく"""
    check_settings()
    catalog = get_catalog()
    logger.info(f"Catalog: {len(catalog)} polling places ready")
    unsubscribe = get_location_provider().subscribe(_log_location)
    yield
    unsubscribe()


app = FastAPI(
    title="Polling Place Locator API",
    description="近くの投票所検索・地図表示範囲・ニュースフィード",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS（開発用に全許可、本番では制限する）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    logger.info(f"Invalid argument on {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.include_router(polling_places_router)
app.include_router(news_router)


def run():
    import uvicorn
    from .config import API_HOST, API_PORT
    uvicorn.run("civic_api.main:app", host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    run()
