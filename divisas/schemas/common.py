"""Common schema helpers."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelSchema(BaseModel):
    """Base schema serialized with the camelCase names of the device layout."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def dump_for_storage(model: BaseModel) -> dict:
    """JSON-compatible dict using aliases, ready for the key-value store."""

    return model.model_dump(mode="json", by_alias=True)
