# app/main.py
import datetime
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.migrate import router as migrate_router, FAILURE_MESSAGE
from app.api.errors import router as errors_router
from migration.config import DEFAULT_ERROR_LOG
from migration.error_log import log_exception
from migration.errors import ConfigurationError
from migration.logging_utils import setup_logging

# INFO until get_config applies the configured level
setup_logging()

app = FastAPI(title="Mongo to BigQuery migrator")

app.include_router(migrate_router, prefix="")
app.include_router(errors_router, prefix="")


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    # config could not be built, so its error_log_path is unknown
    err_id = log_exception(exc, os.getenv("MIGRATION_ERROR_LOG") or DEFAULT_ERROR_LOG,
                           context={"path": request.url.path})
    return JSONResponse(status_code=500, content={"detail": {
        "error_short": "configuration_error",
        "message": f"{FAILURE_MESSAGE} {exc}",
        "error_id": err_id,
    }})


@app.get("/health")
async def health():
    return {"status": "ok", "time": datetime.datetime.now(datetime.timezone.utc).isoformat()}
