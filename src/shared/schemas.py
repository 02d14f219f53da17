"""Base schema for the JSON API.

Fields are declared in snake_case and travel as camelCase on the wire
(``zipCode``, ``paymentIntentId``); either spelling is accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusResponse(ApiModel):
    status: str = "ok"
