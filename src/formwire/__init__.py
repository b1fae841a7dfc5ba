try:
    from ._version import __version__
except ImportError:
    from importlib.metadata import version, PackageNotFoundError

    try:
        __version__ = version("formwire")
    except PackageNotFoundError:
        __version__ = "unknown"

from formwire.widgets.form import ActiveForm, FormError, UnbalancedFieldError
from formwire.widgets.field import ActiveField
from formwire.widgets.registry import register_field_class
from formwire.core.events import (
    AfterFieldRender,
    BeforeFieldRender,
    Dispatcher,
    EventDispatcher,
)
from formwire.core.merge import UNSET, ReplaceValue, merge_options
from formwire.core.model import FormModel, Model
from formwire.runtime.buffer import RenderBuffer
from formwire.validation import (
    is_validation_request,
    validate,
    validate_multiple,
    validation_response,
)

__all__ = [
    "ActiveForm",
    "ActiveField",
    "FormError",
    "UnbalancedFieldError",
    "register_field_class",
    "AfterFieldRender",
    "BeforeFieldRender",
    "Dispatcher",
    "EventDispatcher",
    "UNSET",
    "ReplaceValue",
    "merge_options",
    "FormModel",
    "Model",
    "RenderBuffer",
    "is_validation_request",
    "validate",
    "validate_multiple",
    "validation_response",
]
