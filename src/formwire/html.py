"""HTML tag, attribute and model-input helpers used by the form widgets."""

import json
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl

from formwire.core.model import Model
from formwire.runtime.error_renderer import render_error_summary

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Attributes rendered first, in this order, for stable markup
ATTRIBUTE_ORDER = (
    "type",
    "id",
    "class",
    "name",
    "value",
    "href",
    "src",
    "form",
    "action",
    "method",
    "selected",
    "checked",
    "readonly",
    "disabled",
    "multiple",
    "size",
    "maxlength",
    "width",
    "height",
    "rows",
    "cols",
    "alt",
    "title",
    "rel",
    "media",
)

# Mapping values of these attributes expand into "<name>-<key>" attributes
DATA_ATTRIBUTES = ("data", "aria")

DEFAULT_SUMMARY_HEADER = "<p>Please fix the following errors:</p>"

_ATTRIBUTE_EXPRESSION_RE = re.compile(r"(^|.*\])([\w.+]+)(\[.*|$)")
_INDEX_RE = re.compile(r"\[([^\]]*)\]")
_ID_REPLACEMENTS = (("[]", ""), ("][", "-"), ("[", "-"), ("]", ""), (" ", "-"), (".", "-"))


def encode(value: Any) -> str:
    """Escape HTML special characters (& < > ") in ``value``."""
    s = str(value)
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def css_style_to_dict(style: str) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for declaration in style.split(";"):
        if ":" not in declaration:
            continue
        name, value = declaration.split(":", 1)
        result[name.strip()] = value.strip()
    return result


def css_style_from_dict(style: Mapping[str, Any]) -> str:
    return " ".join(f"{name}: {value};" for name, value in style.items() if value is not None)


def render_tag_attributes(attributes: Optional[Mapping[str, Any]]) -> str:
    """Render ``attributes`` as a string starting with a space.

    ``True`` renders a bare attribute, ``False``/``None`` drop it, a
    ``class`` list is space-joined, a ``style`` mapping becomes CSS, and
    ``data``/``aria`` mappings expand into prefixed attributes.
    """
    if not attributes:
        return ""

    ordered: Dict[str, Any] = {}
    for name in ATTRIBUTE_ORDER:
        if name in attributes:
            ordered[name] = attributes[name]
    for name, value in attributes.items():
        if name not in ordered:
            ordered[name] = value

    html = ""
    for name, value in ordered.items():
        if isinstance(value, bool):
            if value:
                html += f" {name}"
        elif name == "class" and isinstance(value, (list, tuple)):
            if value:
                html += f' class="{encode(" ".join(str(v) for v in value))}"'
        elif name == "style" and isinstance(value, Mapping):
            html += f' style="{encode(css_style_from_dict(value))}"'
        elif name in DATA_ATTRIBUTES and isinstance(value, Mapping):
            for key, item in value.items():
                if isinstance(item, bool):
                    html += f' {name}-{key}="{"true" if item else "false"}"'
                elif isinstance(item, (Mapping, list, tuple)):
                    html += f' {name}-{key}="{encode(json.dumps(item))}"'
                elif item is not None:
                    html += f' {name}-{key}="{encode(item)}"'
        elif isinstance(value, (Mapping, list, tuple)):
            html += f' {name}="{encode(json.dumps(value))}"'
        elif value is not None:
            html += f' {name}="{encode(value)}"'
    return html


def begin_tag(name: str, options: Optional[Mapping[str, Any]] = None) -> str:
    return f"<{name}{render_tag_attributes(options)}>"


def end_tag(name: str) -> str:
    return f"</{name}>"


def tag(name: str, content: Any = "", options: Optional[Mapping[str, Any]] = None) -> str:
    html = begin_tag(name, options)
    if name.lower() in VOID_ELEMENTS:
        return html
    return f"{html}{content}</{name}>"


def add_css_class(options: Dict[str, Any], css_class: Union[str, Iterable[str]]) -> None:
    """Add class names to ``options["class"]`` in place, skipping duplicates."""
    new = css_class.split() if isinstance(css_class, str) else list(css_class)
    existing = options.get("class")
    if isinstance(existing, (list, tuple)):
        options["class"] = list(existing) + [c for c in new if c not in existing]
        return
    current = existing.split() if existing else []
    merged = current + [c for c in new if c not in current]
    options["class"] = " ".join(merged)


def add_css_style(
    options: Dict[str, Any], style: Union[str, Mapping[str, Any]], overwrite: bool = True
) -> None:
    new = css_style_to_dict(style) if isinstance(style, str) else dict(style)
    existing = options.get("style") or {}
    if isinstance(existing, str):
        existing = css_style_to_dict(existing)
    merged = dict(existing)
    for name, value in new.items():
        if overwrite or name not in merged:
            merged[name] = value
    options["style"] = css_style_from_dict(merged)


# -- forms --------------------------------------------------------------------


def hidden_input(name: str, value: Any = None, options: Optional[Mapping[str, Any]] = None) -> str:
    return tag("input", options={"type": "hidden", "name": name, "value": value, **(options or {})})


def begin_form(
    action: Any = "", method: str = "post", options: Optional[Mapping[str, Any]] = None
) -> str:
    """Render the opening form tag.

    Methods other than get/post are posted with a hidden ``_method`` input.
    For get forms, query parameters in the action become hidden inputs since
    browsers drop them on submit.
    """
    action = str(action)
    method = method.lower()
    hidden: List[str] = []

    if method not in ("get", "post"):
        hidden.append(hidden_input("_method", method.upper()))
        method = "post"

    if method == "get" and "?" in action:
        fragment = ""
        if "#" in action:
            action, fragment = action.split("#", 1)
            fragment = "#" + fragment
        action, query = action.split("?", 1)
        for name, value in parse_qsl(query, keep_blank_values=True):
            hidden.append(hidden_input(name, value))
        action += fragment

    attributes = dict(options or {})
    attributes["action"] = action
    attributes["method"] = method
    form = begin_tag("form", attributes)
    if hidden:
        form += "\n" + "\n".join(hidden)
    return form


def end_form() -> str:
    return "</form>"


# -- attribute expressions ----------------------------------------------------


def parse_attribute(attribute: str) -> Tuple[str, str, str]:
    """Split ``[0]dates[1]`` into ``("[0]", "dates", "[1]")``."""
    match = _ATTRIBUTE_EXPRESSION_RE.fullmatch(attribute)
    if match is None:
        raise ValueError(f"Attribute name must contain word characters only: {attribute!r}")
    return match.group(1), match.group(2), match.group(3)


def get_attribute_name(attribute: str) -> str:
    return parse_attribute(attribute)[1]


def get_attribute_value(model: Any, attribute: str) -> Any:
    _, name, suffix = parse_attribute(attribute)
    value = getattr(model, name, None)
    for key in _INDEX_RE.findall(suffix):
        if key == "" or value is None:
            break
        if isinstance(value, Mapping):
            value = value.get(key)
        elif isinstance(value, Sequence) and key.isdigit():
            index = int(key)
            value = value[index] if index < len(value) else None
        else:
            value = None
    return value


def get_input_name(model: Model, attribute: str) -> str:
    """Form input name for ``attribute``, e.g. ``User[0][name]``."""
    form_name = model.form_name()
    prefix, name, suffix = parse_attribute(attribute)
    if form_name == "" and prefix == "":
        return attribute
    if form_name != "":
        return f"{form_name}{prefix}[{name}]{suffix}"
    raise ValueError(f"{type(model).__name__}.form_name() cannot be empty for tabular inputs.")


def get_input_id(model: Model, attribute: str) -> str:
    """DOM id derived from the input name, e.g. ``user-0-name``."""
    input_id = get_input_name(model, attribute).lower()
    for old, new in _ID_REPLACEMENTS:
        input_id = input_id.replace(old, new)
    return input_id


# -- model bound inputs -------------------------------------------------------


def label(content: Any, for_: Optional[str] = None, options: Optional[Mapping[str, Any]] = None) -> str:
    return tag("label", content, {"for": for_, **(options or {})})


def active_label(model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None) -> str:
    options = dict(options or {})
    name = get_attribute_name(attribute)
    for_ = options.pop("for", get_input_id(model, attribute))
    text = options.pop("label", None)
    if text is None:
        text = encode(model.get_attribute_label(name))
    return label(text, for_, options)


def active_input(
    type_: str, model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None
) -> str:
    options = dict(options or {})
    name = options.pop("name", get_input_name(model, attribute))
    value = options.pop("value", get_attribute_value(model, attribute))
    options.setdefault("id", get_input_id(model, attribute))
    return tag("input", options={"type": type_, "name": name, "value": value, **options})


def active_text_input(model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None) -> str:
    return active_input("text", model, attribute, options)


def active_password_input(model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None) -> str:
    return active_input("password", model, attribute, options)


def active_hidden_input(model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None) -> str:
    return active_input("hidden", model, attribute, options)


def active_textarea(model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None) -> str:
    options = dict(options or {})
    name = options.pop("name", get_input_name(model, attribute))
    value = options.pop("value", get_attribute_value(model, attribute))
    options.setdefault("id", get_input_id(model, attribute))
    return tag("textarea", encode("" if value is None else value), {"name": name, **options})


def active_error(model: Model, attribute: str, options: Optional[Mapping[str, Any]] = None) -> str:
    """First error of ``attribute`` wrapped in a tag (empty tag when valid)."""
    options = dict(options or {})
    name = get_attribute_name(attribute)
    tag_name = options.pop("tag", "div")
    should_encode = options.pop("encode", True)
    error = model.get_first_errors().get(name, "")
    return tag(tag_name, encode(error) if should_encode else error, options)


# -- error summary ------------------------------------------------------------


def collect_errors(
    models: Union[Model, Iterable[Model]], show_all_errors: bool = False
) -> List[str]:
    if isinstance(models, Model):
        models = [models]
    lines: List[str] = []
    for model in models:
        if show_all_errors:
            messages = [m for errors in model.get_errors().values() for m in errors]
        else:
            messages = list(model.get_first_errors().values())
        for message in messages:
            if message not in lines:
                lines.append(message)
    return lines


def error_summary(
    models: Union[Model, Iterable[Model]], options: Optional[Mapping[str, Any]] = None
) -> str:
    """Summarize the errors of one or more models in a container tag.

    Special options: ``header`` and ``footer`` (HTML), ``encode`` (escape
    the lines, default True) and ``show_all_errors`` (every message, not
    just the first per attribute). Everything else becomes an attribute of
    the container. The container is always rendered, hidden when empty.
    """
    options = dict(options or {})
    header = options.pop("header", DEFAULT_SUMMARY_HEADER)
    footer = options.pop("footer", "")
    should_encode = options.pop("encode", True)
    lines = collect_errors(models, options.pop("show_all_errors", False))
    if not lines:
        add_css_style(options, "display:none")
    return render_error_summary(
        render_tag_attributes(options), header, lines, footer, encode=should_encode
    )
