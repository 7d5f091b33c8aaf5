from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Snake_case in Python, camelCase on the wire (`deletedGoalIds`, `planId`)."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
