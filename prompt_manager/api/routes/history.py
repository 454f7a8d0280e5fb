"""History endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from prompt_manager.api.dependencies import get_db, resolve_join_mode
from prompt_manager.api.schemas import HistoryCreate
from prompt_manager.config import DEFAULT_HISTORY_LIMIT
from prompt_manager.prompting.join_engine import JoinMode
from prompt_manager.storage import history as store

router = APIRouter()


@router.get("")
def list_history(limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1), db=Depends(get_db)):
    return store.list_history(db, limit)


@router.post("", status_code=201)
def add_history(body: HistoryCreate, db=Depends(get_db)):
    join_mode = resolve_join_mode(db, body.join_mode)
    return store.add_history(db, body.source, join_mode, content=body.content, tokens=body.tokens)


@router.delete("/{entry_id}", status_code=204)
def delete_history_entry(entry_id: str, db=Depends(get_db)):
    store.delete_history_entry(db, entry_id)
    return Response(status_code=204)


@router.get("/{entry_id}/tokens")
def history_tokens(entry_id: str, join_mode: Optional[JoinMode] = None, db=Depends(get_db)):
    mode = resolve_join_mode(db, join_mode)
    return {"tokens": store.history_tokens(db, entry_id, mode)}
