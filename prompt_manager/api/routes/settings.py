"""Settings endpoints and output-path check."""

from fastapi import APIRouter, Depends

from prompt_manager.api.dependencies import get_db
from prompt_manager.api.schemas import CheckPathRequest, SettingsUpdate
from prompt_manager.export.writer import check_output_path
from prompt_manager.storage import settings as store

router = APIRouter()


@router.get("")
def get_settings(db=Depends(get_db)):
    return store.get_settings(db)


@router.put("")
def update_settings(body: SettingsUpdate, db=Depends(get_db)):
    # Only fields present in the request are applied; an explicit null clears `lm_model`.
    return store.update_settings(db, body.model_dump(exclude_unset=True))


@router.post("/check-path")
def check_path(body: CheckPathRequest):
    return {"ok": True, "path": check_output_path(body.prompt_output_path)}
