from typing import Literal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]
ProjectStatus = Literal["active", "on_hold", "completed"]
TaskStatus = Literal["todo", "in_progress", "done"]
MemberRole = Literal["manager", "member"]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; either is accepted on input."""

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }
