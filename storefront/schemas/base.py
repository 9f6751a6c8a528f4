"""Base schema shared by every request and response model"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class BaseSchema(BaseModel):
    """
    camelCase on the wire, snake_case in Python
    Responses are built straight from ORM instances
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class MessageResponse(BaseSchema):
    message: str
