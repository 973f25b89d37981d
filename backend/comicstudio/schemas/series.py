"""
Comic Studio Backend — Series Schemas
=======================================

Create/update bodies and the series representation. Update bodies are
partial: a field left out (or empty) keeps the stored value.
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from comicstudio.schemas.common import CamelModel

SeriesStatus = Literal["ongoing", "completed", "hiatus"]


class SeriesCreate(CamelModel):
    """
    Title and author are optional at the schema level so that a missing
    value produces the 400 "Title and Author are required" business error
    rather than a 422 schema error.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None
    cover_image_id: Optional[str] = None


class SeriesUpdate(CamelModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    cover_image: Optional[str] = None
    cover_image_id: Optional[str] = None
    status: Optional[SeriesStatus] = None
    tags: Optional[List[str]] = None


class SeriesOwner(CamelModel):
    id: uuid.UUID
    username: str


class SeriesResponse(CamelModel):
    id: uuid.UUID
    user: SeriesOwner
    title: str
    author: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    cover_image_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: str
    published: bool
    created_at: datetime
    updated_at: datetime
