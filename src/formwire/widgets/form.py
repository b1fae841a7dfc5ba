"""Form widget: opening/closing tags, nested fields and error summaries."""

import itertools
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from formwire.core.events import AfterFieldRender, BeforeFieldRender, EventDispatcher
from formwire.core.merge import merge_options
from formwire.core.model import Model
from formwire.html import add_css_class, begin_form, end_form
from formwire.html import error_summary as render_error_summary
from formwire.runtime.buffer import RenderBuffer
from formwire.validation import validate, validate_multiple
from formwire.widgets.field import ActiveField
from formwire.widgets.registry import resolve_field_class

log = logging.getLogger(__name__)


class FormError(Exception):
    """Raised when the form API is used out of order."""

    pass


class UnbalancedFieldError(FormError):
    """Raised when begin_field()/end_field() calls do not pair up."""

    pass


FieldConfig = Union[Dict[str, Any], Callable[[Model, str], Dict[str, Any]]]


class ActiveForm:
    """Builds an HTML form for one or more data models.

    Usage:
        form = ActiveForm(action="/signup", dispatcher=dispatcher)
        out = form.open()
        out.write(form.field(user, "name"))
        out.write(form.begin_field(user, "email"))
        ...
        out.write(form.end_field())
        html = form.close()
    """

    VALIDATION_STATE_ON_CONTAINER = "container"
    VALIDATION_STATE_ON_INPUT = "input"

    # Configuration defaults, overridable per instance via keyword arguments
    action: Any = ""
    method: str = "post"
    options: Dict[str, Any]
    field_class: Union[str, Callable[..., Any]] = ActiveField
    field_config: FieldConfig
    encode_error_summary: bool = True
    error_summary_css_class: str = "error-summary"
    required_css_class: str = "required"
    error_css_class: str = "has-error"
    success_css_class: str = "has-success"
    validating_css_class: str = "validating"
    validation_state_on: str = VALIDATION_STATE_ON_CONTAINER
    enable_client_validation: bool = True
    enable_ajax_validation: bool = False
    validation_url: Any = None
    validate_on_submit: bool = True
    validate_on_change: bool = True
    validate_on_blur: bool = True
    validate_on_type: bool = False
    validation_delay: int = 500
    ajax_param: str = "ajax"
    ajax_data_type: str = "json"
    scroll_to_error: bool = True
    scroll_to_error_offset: int = 0

    CONFIG_KEYS = (
        "action",
        "method",
        "options",
        "field_class",
        "field_config",
        "encode_error_summary",
        "error_summary_css_class",
        "required_css_class",
        "error_css_class",
        "success_css_class",
        "validating_css_class",
        "validation_state_on",
        "enable_client_validation",
        "enable_ajax_validation",
        "validation_url",
        "validate_on_submit",
        "validate_on_change",
        "validate_on_blur",
        "validate_on_type",
        "validation_delay",
        "ajax_param",
        "ajax_data_type",
        "scroll_to_error",
        "scroll_to_error_offset",
    )

    # Shared by all instances so synthesized ids never collide
    _counter = itertools.count()

    validate = staticmethod(validate)
    validate_multiple = staticmethod(validate_multiple)

    def __init__(self, dispatcher: Optional[EventDispatcher] = None, **config: Any) -> None:
        unknown = sorted(set(config) - set(self.CONFIG_KEYS))
        if unknown:
            raise TypeError(f"Unknown ActiveForm option(s): {', '.join(unknown)}")

        self.dispatcher = dispatcher
        self.options = dict(config.pop("options", None) or {})
        self.field_config = config.pop("field_config", None) or {}
        for name, value in config.items():
            setattr(self, name, value)

        if self.validation_state_on not in (
            self.VALIDATION_STATE_ON_CONTAINER,
            self.VALIDATION_STATE_ON_INPUT,
        ):
            raise ValueError(
                f"validation_state_on must be 'container' or 'input', got {self.validation_state_on!r}"
            )

        self._id: Optional[str] = None
        self._buffer: Optional[RenderBuffer] = None
        self._fields: List[ActiveField] = []

    def get_id(self) -> str:
        if self._id is None:
            self._id = f"w{next(ActiveForm._counter)}"
        return self._id

    @property
    def buffer(self) -> Optional[RenderBuffer]:
        return self._buffer

    @property
    def is_open(self) -> bool:
        return self._buffer is not None

    # -- lifecycle --------------------------------------------------------------

    def open(
        self,
        action: Any = None,
        method: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> RenderBuffer:
        """Start capturing inner markup. Must be paired with ``close()``."""
        if self._buffer is not None:
            raise FormError("The form is already open; close() it before opening again.")
        if action is not None:
            self.action = action
        if method is not None:
            self.method = method
        if options is not None:
            self.options = dict(options)
        if "id" not in self.options:
            self.options["id"] = self.get_id()

        self._buffer = RenderBuffer()
        log.debug("Opened form %s", self.options["id"])
        return self._buffer

    def close(self) -> str:
        """Stop capturing and return the complete form markup.

        Raises:
            UnbalancedFieldError: if fields opened by ``begin_field()`` are
                still open. The capture is released before raising.
        """
        buffer = self._buffer
        if buffer is None:
            raise FormError("close() called without a matching open().")
        self._buffer = None
        content = buffer.close()

        if self._fields:
            depth = len(self._fields)
            self._fields.clear()
            log.warning("Form %s closed with %d open field(s)", self.options.get("id"), depth)
            raise UnbalancedFieldError("Each begin_field() should have a matching end_field() call.")

        log.debug("Closed form %s", self.options.get("id"))
        return begin_form(self.action, self.method, self.options) + content + end_form()

    # -- fields -----------------------------------------------------------------

    def field(
        self, model: Model, attribute: str, options: Optional[Dict[str, Any]] = None
    ) -> ActiveField:
        """Create a field for ``model``/``attribute``.

        ``field_config`` (or its result, when callable) is merged with
        ``options``; the field class comes from a ``"__class__"`` entry or
        falls back to ``field_class``.
        """
        config = self.field_config
        if callable(config):
            config = config(model, attribute)
        config = merge_options(config or {}, options or {})
        # Injected as-is; merging would copy Mapping-like models
        config.update(model=model, attribute=attribute, form=self)
        factory = resolve_field_class(config.pop("__class__", self.field_class))
        return factory(**config)

    def begin_field(
        self, model: Model, attribute: str, options: Optional[Dict[str, Any]] = None
    ) -> str:
        field = self.field(model, attribute, options)
        self._fields.append(field)
        log.debug("Began field %s (depth %d)", attribute, len(self._fields))
        return field.begin()

    def end_field(self) -> str:
        if not self._fields:
            raise UnbalancedFieldError("Mismatching end_field() call.")
        field = self._fields.pop()
        log.debug("Ended field %s (depth %d)", field.attribute, len(self._fields))
        return field.end()

    @property
    def open_fields(self) -> int:
        return len(self._fields)

    def before_field_render(self, field: ActiveField) -> None:
        if self.dispatcher is not None:
            self.dispatcher.dispatch(BeforeFieldRender(field))

    def after_field_render(self, field: ActiveField) -> None:
        if self.dispatcher is not None:
            self.dispatcher.dispatch(AfterFieldRender(field))

    # -- errors -----------------------------------------------------------------

    def error_summary(
        self,
        models: Union[Model, Iterable[Model]],
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Summary of the models' current errors, hidden when there are none.

        See ``formwire.html.error_summary`` for the special options; ``encode``
        defaults to ``encode_error_summary``.
        """
        options = dict(options or {})
        add_css_class(options, self.error_summary_css_class)
        options.setdefault("encode", self.encode_error_summary)
        return render_error_summary(models, options)

    def client_options(self) -> Dict[str, Any]:
        """Form-level settings for a client-side validation layer."""
        options: Dict[str, Any] = {
            "encodeErrorSummary": self.encode_error_summary,
            "errorSummary": "." + ".".join(self.error_summary_css_class.split()),
            "validateOnSubmit": self.validate_on_submit,
            "errorCssClass": self.error_css_class,
            "successCssClass": self.success_css_class,
            "validatingCssClass": self.validating_css_class,
            "ajaxParam": self.ajax_param,
            "ajaxDataType": self.ajax_data_type,
            "scrollToError": self.scroll_to_error,
            "scrollToErrorOffset": self.scroll_to_error_offset,
            "validationStateOn": self.validation_state_on,
        }
        if self.enable_ajax_validation:
            url = self.validation_url if self.validation_url is not None else self.action
            options["validationUrl"] = str(url)
        return options
