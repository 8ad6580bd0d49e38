# models/schemas/base.py
from datetime import datetime
from typing import Annotated

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _object_id_to_str(value):
    return str(value) if isinstance(value, ObjectId) else value


ObjectIdStr = Annotated[str, BeforeValidator(_object_id_to_str)]


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase keys on the wire and in the store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentModel(CamelModel):
    id: ObjectIdStr = Field(alias="_id")


class TimestampModel(DocumentModel):
    created_at: datetime
    updated_at: datetime
