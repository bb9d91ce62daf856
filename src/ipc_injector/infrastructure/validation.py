import inspect
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ValidationError

from ipc_injector.domain import IPayloadValidator, ValidationFailure, ValidationOptions


class PydanticPayloadValidator(IPayloadValidator):
    """Validates payloads against pydantic models.

    Only ``BaseModel`` subclasses carry validation rules; any other shape
    lets the payload through untouched.
    """

    def has_rules(self, shape: Any) -> bool:
        return inspect.isclass(shape) and issubclass(shape, BaseModel)

    def validate(
        self,
        shape: Any,
        payload: Any,
        options: ValidationOptions,
    ) -> Tuple[Any, List[ValidationFailure]]:
        """Build ``shape`` from ``payload`` and collect failing fields.

        Errors are grouped by their top-level field, keeping the order in
        which pydantic reported them.

        Example:
            >>> class CreateUser(BaseModel):
            ...     name: str
            >>> validator.validate(CreateUser, {}, ValidationOptions())
            (None, [ValidationFailure(field='name', value={}, constraints={'missing': 'Field required'})])
        """
        try:
            return shape.model_validate(payload, strict=options.strict), []
        except ValidationError as e:
            return None, self._to_failures(e)

    @staticmethod
    def _to_failures(error: ValidationError) -> List[ValidationFailure]:
        grouped: Dict[str, Dict[str, Any]] = {}
        for detail in error.errors():
            location = detail.get("loc", ())
            field = str(location[0]) if location else ""
            entry = grouped.setdefault(field, {"value": detail.get("input"), "constraints": {}})
            entry["constraints"].setdefault(detail["type"], detail["msg"])

        return [
            ValidationFailure(field=field, value=entry["value"], constraints=entry["constraints"])
            for field, entry in grouped.items()
        ]
