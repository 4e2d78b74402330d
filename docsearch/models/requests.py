from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from docsearch.core.config import settings


class SearchRequest(BaseModel):
    collection: Optional[str] = None
    query: Optional[Dict[str, Any]] = None
    limit: int = Field(settings.default_limit, ge=1)


class AISearchRequest(BaseModel):
    collection: Optional[str] = None
    query: Optional[str] = None
    limit: int = Field(settings.default_limit, ge=1)


class CountRequest(BaseModel):
    collection: Optional[str] = None
    query: Dict[str, Any] = Field(default_factory=dict)


class AddRequest(BaseModel):
    collection: Optional[str] = None
    data: Optional[Union[List[Dict[str, Any]], Dict[str, Any]]] = None
