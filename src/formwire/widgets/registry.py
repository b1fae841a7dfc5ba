from typing import Any, Callable, Dict, List, TypeVar, Union

F = TypeVar("F", bound=Callable[..., Any])

_FIELD_CLASSES: Dict[str, Callable[..., Any]] = {}


def register_field_class(name: str) -> Callable[[F], F]:
    """Register a field class (or factory) under a tag.

    Usage:
        @register_field_class("inline")
        class InlineField(ActiveField):
            ...

    Then: ActiveForm(field_class="inline")
    """

    def decorator(factory: F) -> F:
        _FIELD_CLASSES[name] = factory
        return factory

    return decorator


def resolve_field_class(spec: Union[str, Callable[..., Any]]) -> Callable[..., Any]:
    if isinstance(spec, str):
        try:
            return _FIELD_CLASSES[spec]
        except KeyError:
            raise KeyError(
                f"Unknown field class {spec!r}; registered: {', '.join(registered_field_classes())}"
            ) from None
    if callable(spec):
        return spec
    raise TypeError(f"Field class must be a tag, class or factory, got {type(spec).__name__}")


def registered_field_classes() -> List[str]:
    return sorted(_FIELD_CLASSES)
