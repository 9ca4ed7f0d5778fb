from datetime import datetime

from pydantic import BaseModel


class TimestampCheckOut(BaseModel):
    last_update: datetime | None
    has_update: bool

    class Config:
        from_attributes = True


class CountCheckOut(BaseModel):
    count: int
    has_update: bool

    class Config:
        from_attributes = True
