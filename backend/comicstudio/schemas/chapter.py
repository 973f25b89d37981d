"""
Comic Studio Backend — Chapter Schemas
========================================

`data` is the chapter document (see comicstudio.documents.tree). It is
accepted as arbitrary JSON: malformed nodes are tolerated by the extractor
and stored as sent, because the editor owns the document format.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from comicstudio.schemas.common import CamelModel


class ChapterCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    order: Optional[int] = Field(default=None, ge=0)


class ChapterUpdate(CamelModel):
    """
    Whole-document replacement: when `data` is present it replaces the
    stored document entirely (an empty list clears it).
    """
    data: Optional[List[Any]] = None
    title: Optional[str] = Field(default=None, max_length=255)
    cover_image: Optional[str] = None
    cover_image_id: Optional[str] = None


class ChapterResponse(CamelModel):
    id: uuid.UUID
    series_id: uuid.UUID = Field(serialization_alias="series")
    title: str
    order: int
    cover_image: Optional[str] = None
    cover_image_id: Optional[str] = None
    data: List[Any] = Field(default_factory=list)
    published: bool
    created_at: datetime
    updated_at: datetime
