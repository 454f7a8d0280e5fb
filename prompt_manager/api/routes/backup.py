"""Backup export/import endpoints."""

from fastapi import APIRouter, Depends

from prompt_manager.api.dependencies import get_db
from prompt_manager.api.schemas import BackupPayload
from prompt_manager.storage import backup as store

router = APIRouter()


@router.get("/export")
def export_backup(db=Depends(get_db)):
    return store.export_backup(db)


@router.post("/import")
def import_backup(body: BackupPayload, db=Depends(get_db)):
    store.import_backup(db, body.model_dump())
    return {"ok": True}
