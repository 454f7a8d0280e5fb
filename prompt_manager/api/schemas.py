"""Pydantic request schemas for the HTTP API.

Field validation lives here; cross-field rules that need stored state (for
example "content or tokens required", duplicate phrases) are enforced by the
storage layer and surface as `HttpError`.

Every request that joins or splits text accepts an optional `join_mode`. When
omitted, the endpoint substitutes the stored setting before calling the engine.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from prompt_manager.prompting.join_engine import JoinMode
from prompt_manager.prompting.prompt_builder import LMMode


# ========================
# Categories & phrases
# ========================

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    order_index: Optional[int] = None


class PhraseCreate(BaseModel):
    category_id: str
    text: str = Field(..., min_length=1)


class PhraseBulkCreate(BaseModel):
    category_id: str
    lines: str = Field(..., min_length=1, description="One phrase per line")


class PhraseUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=1)
    favorite: Optional[int] = Field(None, ge=0, le=1)
    category_id: Optional[str] = None
    order_index: Optional[int] = Field(None, ge=0)


# ========================
# Prompts & history
# ========================

class PromptCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tokens: Optional[List[str]] = None
    join_mode: Optional[JoinMode] = None


class PromptUpdate(PromptCreate):
    pass


class HistoryCreate(BaseModel):
    source: str = Field(..., min_length=1)
    content: Optional[str] = None
    tokens: Optional[List[str]] = None
    join_mode: Optional[JoinMode] = None


# ========================
# Engine, export, settings
# ========================

class JoinRequest(BaseModel):
    tokens: List[str]
    join_mode: Optional[JoinMode] = None


class SplitRequest(BaseModel):
    content: str
    join_mode: Optional[JoinMode] = None


class ExportRequest(JoinRequest):
    pass


class SettingsUpdate(BaseModel):
    prompt_output_path: Optional[str] = Field(None, min_length=1)
    join_mode: Optional[JoinMode] = None
    lm_base_url: Optional[str] = Field(None, min_length=1)
    lm_api_key: Optional[str] = Field(None, min_length=1)
    lm_model: Optional[str] = None
    lm_temperature: Optional[float] = Field(None, ge=0, le=2)
    lm_top_p: Optional[float] = Field(None, ge=0, le=1)
    lm_top_k: Optional[int] = Field(None, ge=0)
    lm_use_temperature: Optional[bool] = None
    lm_use_top_p: Optional[bool] = None
    lm_use_top_k: Optional[bool] = None


class CheckPathRequest(BaseModel):
    prompt_output_path: str = Field(..., min_length=1)


class BackupPayload(BaseModel):
    categories: List[dict]
    phrases: List[dict]
    prompts: List[dict]
    history: List[dict]
    settings: Optional[dict] = None


class LMRequest(BaseModel):
    mode: LMMode
    text: str = Field(..., min_length=1)
