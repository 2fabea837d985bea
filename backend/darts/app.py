from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette import status
from starlette.responses import JSONResponse

from darts.config import config, environment
from darts.database import database
from darts.routes import matches, players, tournaments
from darts.utils.alembic import alembic_run_migrations
from darts.utils.errors import DartsError
from darts.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if config.auto_run_migrations:
        alembic_run_migrations()

    await database.connect()
    logger.info(f"Started darts backend in {environment.value} environment")
    yield
    await database.disconnect()


app = FastAPI(
    title="Darts Tournament API",
    docs_url="/docs",
    version="1.0.0",
    lifespan=lifespan,
)

origins = [origin.strip() for origin in config.cors_origins.split(",") if origin.strip() != ""]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DartsError)
async def darts_error_handler(_: Request, exc: DartsError) -> JSONResponse:
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        {"detail": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


routers = {
    "Players": players.router,
    "Tournaments": tournaments.router,
    "Matches": matches.router,
}

for tag, router in routers.items():
    app.include_router(router, tags=[tag])
