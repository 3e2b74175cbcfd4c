from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HealthResponse(BaseModel):
    status: str
    environment: str
    timestamp: float
    sheets_configured: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
