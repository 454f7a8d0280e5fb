"""Phrase endpoints, including duplicate-aware bulk insert."""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from prompt_manager.api.dependencies import get_db
from prompt_manager.api.schemas import PhraseBulkCreate, PhraseCreate, PhraseUpdate
from prompt_manager.storage import phrases as store

router = APIRouter()


@router.get("")
def list_phrases(category_id: Optional[str] = None, db=Depends(get_db)):
    return store.list_phrases(db, category_id)


@router.post("", status_code=201)
def add_phrase(body: PhraseCreate, db=Depends(get_db)):
    return store.add_phrase(db, body.category_id, body.text)


@router.post("/bulk", status_code=201)
def bulk_add_phrases(body: PhraseBulkCreate, db=Depends(get_db)):
    """Insert one phrase per line; duplicates are skipped and listed as typed."""
    return store.bulk_add_phrases(db, body.category_id, body.lines)


@router.put("/{phrase_id}")
def update_phrase(phrase_id: str, body: PhraseUpdate, db=Depends(get_db)):
    return store.update_phrase(
        db,
        phrase_id,
        text=body.text,
        favorite=body.favorite,
        category_id=body.category_id,
        order_index=body.order_index,
    )


@router.delete("/{phrase_id}", status_code=204)
def delete_phrase(phrase_id: str, db=Depends(get_db)):
    store.delete_phrase(db, phrase_id)
    return Response(status_code=204)
