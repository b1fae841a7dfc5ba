"""Model protocol consumed by the form widgets, plus a pydantic-backed model."""

import re
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterable,
    List,
    Optional,
    Protocol,
    Type,
    Union,
    runtime_checkable,
)

from pydantic import BaseModel, ValidationError


@runtime_checkable
class Model(Protocol):
    """What a form needs from a data model.

    Validation errors are collected per attribute by ``validate`` and read
    back through ``get_errors``; the form never runs validation itself
    except through the aggregation helpers.
    """

    def form_name(self) -> str: ...

    def validate(self, attributes: Optional[Iterable[str]] = None) -> bool: ...

    def get_errors(self) -> Dict[str, List[str]]: ...

    def get_first_errors(self) -> Dict[str, str]: ...

    def has_errors(self, attribute: Optional[str] = None) -> bool: ...

    def is_attribute_required(self, attribute: str) -> bool: ...

    def get_attribute_label(self, attribute: str) -> str: ...


_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def generate_attribute_label(name: str) -> str:
    """Turn ``first_name`` or ``firstName`` into ``First Name``."""
    words = re.split(r"[\s_.\-]+", _CAMEL_RE.sub(" ", name))
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


class FormModel:
    """Form-bound model whose validation pass runs a pydantic schema.

    Attribute values live on the instance; ``schema`` declares the rules.

    Usage:
        class UserSchema(BaseModel):
            name: str

        class User(FormModel):
            schema = UserSchema

        user = User(name="")
        user.validate()
    """

    schema: ClassVar[Optional[Type[BaseModel]]] = None
    labels: ClassVar[Dict[str, str]] = {}
    # Attribute receiving errors raised by model-level validators; the first
    # validated attribute when None
    model_error_attribute: ClassVar[Optional[str]] = None

    def __init__(self, **values: Any) -> None:
        self._errors: Dict[str, List[str]] = {}
        for name, value in values.items():
            setattr(self, name, value)

    def form_name(self) -> str:
        return type(self).__name__

    def attributes(self) -> List[str]:
        if self.schema is None:
            return []
        return list(self.schema.model_fields)

    def get_attributes(self) -> Dict[str, Any]:
        values = vars(self)
        return {name: values[name] for name in self.attributes() if name in values}

    def get_attribute_label(self, attribute: str) -> str:
        return self.labels.get(attribute) or generate_attribute_label(attribute)

    def is_attribute_required(self, attribute: str) -> bool:
        if self.schema is None:
            return False
        field = self.schema.model_fields.get(attribute)
        return field is not None and field.is_required()

    def validate(self, attributes: Union[str, Iterable[str], None] = None) -> bool:
        """Run the schema and record errors for ``attributes`` (all if None).

        Previously recorded errors are cleared first. Returns True when no
        errors were recorded.
        """
        if attributes is None:
            names = self.attributes()
        elif isinstance(attributes, str):
            names = [attributes]
        else:
            names = list(attributes)

        self.clear_errors()
        if self.schema is None:
            return True

        try:
            self.schema.model_validate(self.get_attributes())
        except ValidationError as exc:
            for error in exc.errors():
                if error["loc"]:
                    name = str(error["loc"][0])
                else:
                    name = self.model_error_attribute or (names[0] if names else "")
                if name in names:
                    self.add_error(name, self._error_message(name, error))

        return not self.has_errors()

    def _error_message(self, attribute: str, error: Dict[str, Any]) -> str:
        if error["type"] == "missing":
            return f"{self.get_attribute_label(attribute)} cannot be blank."
        ctx = error.get("ctx") or {}
        if error["type"] == "value_error" and "error" in ctx:
            return str(ctx["error"])
        return error["msg"]

    def add_error(self, attribute: str, message: str) -> None:
        self._errors.setdefault(attribute, []).append(message)

    def clear_errors(self, attribute: Optional[str] = None) -> None:
        if attribute is None:
            self._errors.clear()
        else:
            self._errors.pop(attribute, None)

    def has_errors(self, attribute: Optional[str] = None) -> bool:
        if attribute is None:
            return bool(self._errors)
        return bool(self._errors.get(attribute))

    def get_errors(self) -> Dict[str, List[str]]:
        return {name: list(errors) for name, errors in self._errors.items() if errors}

    def get_first_errors(self) -> Dict[str, str]:
        return {name: errors[0] for name, errors in self._errors.items() if errors}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_attributes()!r})"
