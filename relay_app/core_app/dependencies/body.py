from json import JSONDecodeError
from typing import Callable, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from relay_app.core_app.exceptions import ValidationError
from relay_app.core_app.tools.setup_logger import setup_logger

logger = setup_logger(__name__.upper())

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

ModelT = TypeVar("ModelT", bound=BaseModel)


def request_body(model: Type[ModelT], error_message: str) -> Callable:
    """
    Dependency that reads a JSON or urlencoded form body into `model`.
    Anything unreadable or incomplete becomes a ValidationError with `error_message`.
    """

    async def dependency(request: Request) -> ModelT:
        content_type = request.headers.get("content-type", "")
        try:
            if content_type.startswith(FORM_CONTENT_TYPE):
                payload = dict(await request.form())
            else:
                payload = await request.json()
            return model.model_validate(payload)
        except (JSONDecodeError, UnicodeDecodeError, PydanticValidationError) as e:
            logger.info(f"Rejected request to {request.url.path}: {e}")
            raise ValidationError(error_message) from e

    return dependency
