from datetime import date
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

class WeekIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    start_date: date
    end_date: date

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class WeekOut(BaseModel):
    id: int
    name: str
    start_date: date
    end_date: date
    status: str

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
