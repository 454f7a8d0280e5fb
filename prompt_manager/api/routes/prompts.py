"""Saved-prompt endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from prompt_manager.api.dependencies import get_db, resolve_join_mode
from prompt_manager.api.schemas import PromptCreate, PromptUpdate
from prompt_manager.prompting.join_engine import JoinMode
from prompt_manager.storage import prompts as store

router = APIRouter()


@router.get("")
def list_prompts(db=Depends(get_db)):
    return store.list_prompts(db)


@router.post("", status_code=201)
def create_prompt(body: PromptCreate, db=Depends(get_db)):
    join_mode = resolve_join_mode(db, body.join_mode)
    return store.create_prompt(db, join_mode, title=body.title, content=body.content, tokens=body.tokens)


@router.put("/{prompt_id}")
def update_prompt(prompt_id: str, body: PromptUpdate, db=Depends(get_db)):
    join_mode = resolve_join_mode(db, body.join_mode)
    return store.update_prompt(
        db, prompt_id, join_mode, title=body.title, content=body.content, tokens=body.tokens
    )


@router.delete("/{prompt_id}", status_code=204)
def delete_prompt(prompt_id: str, db=Depends(get_db)):
    store.delete_prompt(db, prompt_id)
    return Response(status_code=204)


@router.get("/{prompt_id}/tokens")
def prompt_tokens(prompt_id: str, join_mode: Optional[JoinMode] = None, db=Depends(get_db)):
    """Tokens for reloading into the builder; split from content when none were stored."""
    mode = resolve_join_mode(db, join_mode)
    return {"tokens": store.prompt_tokens(db, prompt_id, mode)}
