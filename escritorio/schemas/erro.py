from pydantic import BaseModel

from ..exceptions import ErrorType


class ErrorDetail(BaseModel):
    type: ErrorType
    message: str
    details: dict | None = None
