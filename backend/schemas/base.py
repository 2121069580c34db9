from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Incoming payloads: accept snake_case or camelCase keys, trim strings,
# drop anything the schema does not know about
class InputBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )
