# app/api/migrate.py
from fastapi import APIRouter, Depends, HTTPException

from app.deps import get_config, get_table_store, get_source_factory
from app.models import MigrateRequest, MigrateResponse, MigrateErrorDetail
from migration.config import MigrationConfig
from migration.error_log import log_exception, log_error
from migration.pipeline import MigrationPipeline
from migration.logging_utils import get_logger

router = APIRouter()
logger = get_logger(__name__)

FAILURE_MESSAGE = "An error occurred during migration."


def _error_detail(err_id: str, message: str, error_type: str = None, failed_rows=None) -> dict:
    return MigrateErrorDetail(
        error_short="migration_failed",
        message=message,
        error_id=err_id,
        error_type=error_type,
        failed_rows=failed_rows or [],
        hint="check /last_error for the full traceback",
    ).model_dump()


# sync route: FastAPI runs the blocking migration in its threadpool
@router.post("/migrate", response_model=MigrateResponse)
def migrate(
    req: MigrateRequest,
    config: MigrationConfig = Depends(get_config),
    store=Depends(get_table_store),
    source_factory=Depends(get_source_factory),
):
    context = {
        "source_collection_name": req.source_collection_name,
        "destination_table_name": req.destination_table_name,
        "dataset": config.destination_dataset_id,
    }
    try:
        pipeline = MigrationPipeline(config, store, source_factory)
        outcome = pipeline.run(req.source_collection_name, req.destination_table_name)
    except Exception as exc:
        logger.exception("Error during migration")
        err_id = log_exception(exc, config.error_log_path, context=context)
        raise HTTPException(status_code=500, detail=_error_detail(err_id, FAILURE_MESSAGE, type(exc).__name__))

    if not outcome.succeeded:
        context["state"] = outcome.state.value if outcome.state else None
        context["failed_rows"] = [r.model_dump() for r in outcome.failed_rows]
        err_id = log_error(outcome.error_type, outcome.message, config.error_log_path, context=context)
        raise HTTPException(status_code=500, detail=_error_detail(
            err_id, f"{FAILURE_MESSAGE} {outcome.message}", outcome.error_type, outcome.failed_rows
        ))

    return MigrateResponse(
        status="ok",
        message=outcome.message,
        rows_loaded=outcome.rows_loaded,
        batches_loaded=outcome.batches_loaded,
    )
