"""Request-scoped helpers shared by the API routers."""

from fastapi import Request

from prompt_manager.prompting.join_engine import JoinMode
from prompt_manager.storage.database import Database
from prompt_manager.storage.settings import get_join_mode


def get_db(request: Request) -> Database:
    return request.app.state.db


def resolve_join_mode(db: Database, requested) -> JoinMode:
    """Return the request's join mode, or the stored default when omitted."""
    if requested is not None:
        return JoinMode(requested)
    return get_join_mode(db)
