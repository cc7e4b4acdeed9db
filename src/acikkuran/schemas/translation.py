"""Pydantic schemas for user translations and footnotes.

Learn: Pydantic v2 models validate request/response data. Separate
input schemas (what the caller may send) from read schemas (what we
return). Validation failures never reach the service layer; main.py
turns them into 400 invalid-params.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

# verse_id and footnote number are INTEGER (int4) columns
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1


# ─── Footnotes ──────────────────────────────────────────

class FootnoteIn(BaseModel):
    """One footnote as sent by the editor.

    Both fields are optional: incomplete entries are skipped on save
    rather than rejected, matching what the editor sends for empty rows.
    """

    number: Optional[int] = Field(None, ge=INT4_MIN, le=INT4_MAX)
    text: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.number) and bool(self.text)


class FootnoteRead(BaseModel):
    number: int
    text: str

    model_config = {"from_attributes": True}


# ─── Translations ───────────────────────────────────────

class TranslationWrite(BaseModel):
    """Body of POST /user/translation.

    There is no user_id field: the owner is always the
    verified token subject. Unknown fields (including user_id) are ignored.
    """

    verse_id: int = Field(..., gt=0, le=INT4_MAX)
    text: str = Field(..., min_length=1)
    footnotes: Optional[list[FootnoteIn]] = None

    @model_validator(mode="after")
    def unique_footnote_numbers(self):
        if self.footnotes:
            numbers = [f.number for f in self.footnotes if f.is_complete]
            if len(numbers) != len(set(numbers)):
                raise ValueError("footnote numbers must be unique")
        return self


class TranslationRead(BaseModel):
    id: int
    user_id: str
    verse_id: int
    text: str
    created_at: datetime
    updated_at: datetime
    footnotes: list[FootnoteRead] = []

    model_config = {"from_attributes": True}


class TranslationResponse(BaseModel):
    """Every translation endpoint wraps its payload in `data`."""

    data: Optional[TranslationRead] = None
