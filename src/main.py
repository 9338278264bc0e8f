from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config.settings import settings
from .api.v1.api import api_router
from .core.auth import IdentityMiddleware, get_token_service
from .core.logging import configure_logging

root_logger = configure_logging()
logger = root_logger.getChild(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a bad signing key stops startup instead of failing every request
    token_service = get_token_service()
    logger.info(f"{settings.APP_NAME} starting - token ttl: {token_service.ttl_seconds}s")
    yield
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "HX-Request"],
)

# Resolves the Token cookie into request.state.identity
app.add_middleware(IdentityMiddleware)

app.include_router(api_router)

@app.get("/")
async def root():
    return {"message": "Welcome!"}

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug",
        workers=settings.WORKERS,
    )
