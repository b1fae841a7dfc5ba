"""Validation helpers producing error maps for AJAX responses.

Both helpers run the models' own validation, which replaces whatever
errors the models carried before the call.

Usage in a starlette endpoint:

    async def signup(request):
        user = User(**(await request.form()))
        if await is_validation_request(request):
            return validation_response(validate(user))
        ...
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from starlette.requests import Request
from starlette.responses import JSONResponse

from formwire.core.model import Model
from formwire.html import get_input_id

ErrorMap = Dict[str, List[str]]


def validate(model: Model, *args: Any) -> ErrorMap:
    """Validate one or several models; errors keyed by input id.

    ``validate(model)`` and ``validate(model, ["name"])`` validate a single
    model, optionally limited to some attributes. ``validate(m1, m2, ...)``
    validates every model with all of their attributes.
    """
    attributes: Optional[Iterable[str]]
    if args and isinstance(args[0], Model):
        models: Sequence[Model] = (model, *args)
        attributes = None
    else:
        if len(args) > 1:
            raise TypeError("validate() takes a single attribute filter for one model")
        models = (model,)
        attributes = args[0] if args else None
        if attributes is not None and not isinstance(attributes, str):
            attributes = list(attributes)

    result: ErrorMap = {}
    for m in models:
        m.validate(attributes)
        for attribute, errors in m.get_errors().items():
            if errors:
                result[get_input_id(m, attribute)] = errors
    return result


def validate_multiple(
    models: Iterable[Model], attributes: Optional[Iterable[str]] = None
) -> ErrorMap:
    """Validate tabular input; ids carry the model's position (``user-0-name``)."""
    if attributes is not None and not isinstance(attributes, str):
        attributes = list(attributes)

    result: ErrorMap = {}
    for i, model in enumerate(models):
        model.validate(attributes)
        for attribute, errors in model.get_errors().items():
            if errors:
                result[get_input_id(model, f"[{i}]{attribute}")] = errors
    return result


def validation_response(result: ErrorMap, status_code: int = 200) -> JSONResponse:
    return JSONResponse(result, status_code=status_code)


async def is_validation_request(request: Request, ajax_param: str = "ajax") -> bool:
    """Whether ``request`` is an AJAX validation round trip for a form.

    The marker is looked up in the query string, then in the posted form.
    """
    if ajax_param in request.query_params:
        return True
    if request.method == "POST":
        form = await request.form()
        return ajax_param in form
    return False
