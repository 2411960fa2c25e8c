from typing import Any

from pydantic import BaseModel, model_validator


class FormPayload(BaseModel):
    """Base for create/update payloads posted from admin forms.

    Empty strings from form inputs become None.
    """

    class Config:
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}
        return data


class ActionResult(BaseModel):
    success: bool = True
    message: str
