import logging
from fastapi import FastAPI

from securepass.logging_config import configure_logging
from .database import init_db
from .routers import auth, records
from .config import settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s started", settings.PROJECT_NAME)


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])

app.include_router(records.router, prefix=settings.API_V1_STR, tags=["Records"])


@app.get("/")
def root():
    return {"message": "SecurePass server is running"}


def run(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn

    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
