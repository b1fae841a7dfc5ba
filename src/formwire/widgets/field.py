"""A single labeled input bound to a model attribute."""

import re
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Union

from formwire.core.merge import merge_options
from formwire.core.model import Model
from formwire.html import (
    active_error,
    active_hidden_input,
    active_label,
    active_password_input,
    active_text_input,
    active_textarea,
    add_css_class,
    begin_tag,
    end_tag,
    get_attribute_name,
    get_input_id,
    tag,
)
from formwire.widgets.registry import register_field_class

if TYPE_CHECKING:
    from formwire.widgets.form import ActiveForm

_PLACEHOLDER_RE = re.compile(r"\{\w+\}")


@register_field_class("default")
class ActiveField:
    """Label, input, hint and error for one ``(model, attribute)`` pair.

    Fields are created by ``ActiveForm.field()``; ``begin()``/``end()`` give
    the container tags and ``render()`` the whole thing.
    """

    DEFAULT_TEMPLATE = "{label}\n{input}\n{hint}\n{error}"

    def __init__(
        self,
        form: "ActiveForm",
        model: Model,
        attribute: str,
        options: Optional[Dict[str, Any]] = None,
        template: Optional[str] = None,
        input_options: Optional[Dict[str, Any]] = None,
        error_options: Optional[Dict[str, Any]] = None,
        label_options: Optional[Dict[str, Any]] = None,
        hint_options: Optional[Dict[str, Any]] = None,
        enable_client_validation: Optional[bool] = None,
        enable_ajax_validation: Optional[bool] = None,
        validate_on_change: Optional[bool] = None,
        validate_on_blur: Optional[bool] = None,
        validate_on_type: Optional[bool] = None,
        validation_delay: Optional[int] = None,
        selectors: Optional[Dict[str, str]] = None,
        parts: Optional[Dict[str, str]] = None,
    ) -> None:
        self.form = form
        self.model = model
        self.attribute = attribute
        self.options = {"class": "form-group"} if options is None else options
        self.template = self.DEFAULT_TEMPLATE if template is None else template
        self.input_options = {"class": "form-control"} if input_options is None else input_options
        self.error_options = {"class": "help-block"} if error_options is None else error_options
        self.label_options = {"class": "control-label"} if label_options is None else label_options
        self.hint_options = {"class": "hint-block"} if hint_options is None else hint_options
        self.enable_client_validation = enable_client_validation
        self.enable_ajax_validation = enable_ajax_validation
        self.validate_on_change = validate_on_change
        self.validate_on_blur = validate_on_blur
        self.validate_on_type = validate_on_type
        self.validation_delay = validation_delay
        self.selectors = selectors or {}
        self.parts: Dict[str, str] = dict(parts or {})

    @property
    def attribute_name(self) -> str:
        return get_attribute_name(self.attribute)

    @property
    def input_id(self) -> str:
        return get_input_id(self.model, self.attribute)

    def _state_on_container(self) -> bool:
        return self.form.validation_state_on == self.form.VALIDATION_STATE_ON_CONTAINER

    def begin(self) -> str:
        """Opening container tag with required/error state classes."""
        options = dict(self.options)
        tag_name = options.pop("tag", "div")
        add_css_class(options, f"field-{self.input_id}")
        if self.model.is_attribute_required(self.attribute_name):
            add_css_class(options, self.form.required_css_class)
        if self._state_on_container() and self.model.has_errors(self.attribute_name):
            add_css_class(options, self.form.error_css_class)
        return begin_tag(tag_name, options)

    def end(self) -> str:
        return end_tag(self.options.get("tag", "div"))

    def render(self, content: Union[str, Callable[["ActiveField"], str], None] = None) -> str:
        self.form.before_field_render(self)

        if content is None:
            if "{input}" not in self.parts:
                self.text_input()
            if "{label}" not in self.parts:
                self.label()
            if "{error}" not in self.parts:
                self.error()
            self.parts.setdefault("{hint}", "")
            content = _PLACEHOLDER_RE.sub(
                lambda m: self.parts.get(m.group(0), m.group(0)), self.template
            )
        elif callable(content):
            content = content(self)

        html = f"{self.begin()}\n{content}\n{self.end()}"
        self.form.after_field_render(self)
        return html

    def __str__(self) -> str:
        return self.render()

    # -- parts ----------------------------------------------------------------

    def label(self, label: Union[str, bool, None] = None, options: Optional[Dict[str, Any]] = None) -> "ActiveField":
        if label is False:
            self.parts["{label}"] = ""
            return self
        options = merge_options(self.label_options, options or {})
        if label is not None:
            options["label"] = label
        self.parts["{label}"] = active_label(self.model, self.attribute, options)
        return self

    def hint(self, content: Union[str, bool, None], options: Optional[Dict[str, Any]] = None) -> "ActiveField":
        if content is False or content is None:
            self.parts["{hint}"] = ""
            return self
        options = merge_options(self.hint_options, options or {})
        tag_name = options.pop("tag", "div")
        self.parts["{hint}"] = tag(tag_name, content, options)
        return self

    def error(self, options: Union[Dict[str, Any], bool, None] = None) -> "ActiveField":
        if options is False:
            self.parts["{error}"] = ""
            return self
        options = merge_options(self.error_options, options or {})
        self.parts["{error}"] = active_error(self.model, self.attribute, options)
        return self

    def _input_options(self, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        options = merge_options(self.input_options, options or {})
        if not self._state_on_container() and self.model.has_errors(self.attribute_name):
            add_css_class(options, self.form.error_css_class)
        return options

    def text_input(self, options: Optional[Dict[str, Any]] = None) -> "ActiveField":
        self.parts["{input}"] = active_text_input(self.model, self.attribute, self._input_options(options))
        return self

    def password_input(self, options: Optional[Dict[str, Any]] = None) -> "ActiveField":
        self.parts["{input}"] = active_password_input(self.model, self.attribute, self._input_options(options))
        return self

    def hidden_input(self, options: Optional[Dict[str, Any]] = None) -> "ActiveField":
        # Hidden inputs carry no visible label
        self.parts["{input}"] = active_hidden_input(self.model, self.attribute, self._input_options(options))
        self.parts.setdefault("{label}", "")
        return self

    def textarea(self, options: Optional[Dict[str, Any]] = None) -> "ActiveField":
        self.parts["{input}"] = active_textarea(self.model, self.attribute, self._input_options(options))
        return self

    # -- client side ----------------------------------------------------------

    def _flag(self, name: str) -> Any:
        value = getattr(self, name)
        return getattr(self.form, name) if value is None else value

    def client_options(self) -> Dict[str, Any]:
        """Per-field settings for a client-side validation layer."""
        input_id = self.input_id
        error_class = self.error_options.get("class") or "help-block"
        if isinstance(error_class, (list, tuple)):
            error_class = " ".join(error_class)
        return {
            "id": input_id,
            "name": self.attribute,
            "container": self.selectors.get("container", f".field-{input_id}"),
            "input": self.selectors.get("input", f"#{input_id}"),
            "error": self.selectors.get("error", "." + ".".join(error_class.split())),
            "enableClientValidation": self._flag("enable_client_validation"),
            "enableAjaxValidation": self._flag("enable_ajax_validation"),
            "validateOnChange": self._flag("validate_on_change"),
            "validateOnBlur": self._flag("validate_on_blur"),
            "validateOnType": self._flag("validate_on_type"),
            "validationDelay": self._flag("validation_delay"),
        }

    def __repr__(self) -> str:
        return f"ActiveField({type(self.model).__name__}, {self.attribute!r})"
