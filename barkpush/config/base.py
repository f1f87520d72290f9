from pydantic import BaseModel, ConfigDict


class BarkBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", protected_namespaces=())
