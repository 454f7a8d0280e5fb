"""Join/split preview and file export endpoints.

These are the only endpoints that call the join engine directly. The join
mode comes from the request or, when omitted, from stored settings; either
way it is passed explicitly into `build_prompt` / `split_prompt`.
"""

from fastapi import APIRouter, Depends

from prompt_manager.api.dependencies import get_db, resolve_join_mode
from prompt_manager.api.schemas import ExportRequest, JoinRequest, SplitRequest
from prompt_manager.export.service import export_prompt
from prompt_manager.prompting.join_engine import build_prompt, split_prompt

router = APIRouter()


@router.post("/join")
def join_tokens(body: JoinRequest, db=Depends(get_db)):
    join_mode = resolve_join_mode(db, body.join_mode)
    return {"text": build_prompt(body.tokens, join_mode), "join_mode": join_mode.value}


@router.post("/split")
def split_content(body: SplitRequest, db=Depends(get_db)):
    join_mode = resolve_join_mode(db, body.join_mode)
    return {"tokens": split_prompt(body.content, join_mode), "join_mode": join_mode.value}


@router.post("/export")
def export(body: ExportRequest, db=Depends(get_db)):
    join_mode = resolve_join_mode(db, body.join_mode)
    return export_prompt(db, body.tokens, join_mode)
