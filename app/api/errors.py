# app/api/errors.py
from fastapi import APIRouter, Depends, HTTPException

from app.deps import get_config
from migration.config import MigrationConfig
from migration.error_log import read_last_error

router = APIRouter()


@router.get("/last_error")
def last_error(config: MigrationConfig = Depends(get_config)):
    entry = read_last_error(config.error_log_path)
    if entry is None:
        raise HTTPException(status_code=404, detail="no json errors found")
    return entry
