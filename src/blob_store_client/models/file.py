from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blob_store_client.utils.time_utils import to_utc, utc_now


class FileState(str, enum.Enum):
    ACTIVE = "active"
    FROZEN = "frozen"


class FileCreate(BaseModel):
    """Набор атрибутов для вставки новой строки в files."""
    name: str = Field(min_length=1)
    blob: bytes = b""
    size: Optional[int] = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return to_utc(value)

    @model_validator(mode="after")
    def _default_size(self) -> "FileCreate":
        if self.size is None:
            self.size = len(self.blob)
        return self


class FileSnapshot(BaseModel):
    """
    Неизменяемый снимок строки files.
    После каждой мутации заменяется целиком новым снимком.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    size: int
    # None: blob не загружен (после append), File дочитает его при обращении
    blob: Optional[bytes] = b""
    created_at: datetime
    updated_at: datetime

    @property
    def blob_loaded(self) -> bool:
        return self.blob is not None

    def merged(self, fields: dict) -> "FileSnapshot":
        return self.model_copy(update=fields)
