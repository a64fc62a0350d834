from fastapi import HTTPException, status
from typing import Dict, List


class FieldValidationError(Exception):
    """Erreur de validation rattachée à un ou plusieurs champs (-> 422)"""

    def __init__(self, message: str, errors: Dict[str, List[str]]):
        super().__init__(message)
        self.message = message
        self.errors = errors


def validation_http_error(exc: FieldValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": exc.message, "errors": exc.errors}
    )
