from fastapi import FastAPI

from training_load import __version__
from training_load.api.analytics import router as analytics_router
from training_load.config.settings import settings
from training_load.core.logger import setup_logger

setup_logger(level=settings.log_level, log_file=settings.log_file)

app = FastAPI(title="Training Load Analytics", version=__version__)

app.include_router(analytics_router)


@app.get("/health")
def health():
    return {"status": "ok"}
