"""LLM proxy endpoint for phrase translation and improvement."""

from fastapi import APIRouter, Depends

from prompt_manager.api.dependencies import get_db
from prompt_manager.api.schemas import LMRequest
from prompt_manager.llm.service import transform_text
from prompt_manager.storage.settings import get_settings

router = APIRouter()


@router.post("")
def lm_transform(body: LMRequest, db=Depends(get_db)):
    return {"text": transform_text(body.mode, body.text, get_settings(db))}
