"""Category endpoints."""

from fastapi import APIRouter, Depends, Response

from prompt_manager.api.dependencies import get_db
from prompt_manager.api.schemas import CategoryCreate, CategoryUpdate
from prompt_manager.storage import categories as store

router = APIRouter()


@router.get("")
def list_categories(db=Depends(get_db)):
    return store.list_categories(db)


@router.post("", status_code=201)
def create_category(body: CategoryCreate, db=Depends(get_db)):
    return store.create_category(db, body.name)


@router.put("/{category_id}")
def update_category(category_id: str, body: CategoryUpdate, db=Depends(get_db)):
    return store.update_category(db, category_id, name=body.name, order_index=body.order_index)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: str, db=Depends(get_db)):
    store.delete_category(db, category_id)
    return Response(status_code=204)
