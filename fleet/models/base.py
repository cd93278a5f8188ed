from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanged as camelCase JSON and built from snake_case in code"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
