# erp_api/schemas/base.py

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


WEBSITE_PATTERN = re.compile(r"^https?://.+\..+")


class CamelModel(BaseModel):
    """JSON bodies are camelCase; snake_case names are accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def check_website(value: str | None) -> str | None:
    if value and not WEBSITE_PATTERN.match(value):
        raise ValueError("Invalid website URL")
    return value or None
