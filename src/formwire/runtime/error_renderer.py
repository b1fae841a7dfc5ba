from typing import Any, Dict, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape

# Templating environment for widget fragments shipped with the package
_env = Environment(
    loader=PackageLoader("formwire", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_template(template_name: str, context: Dict[str, Any]) -> str:
    """Render a Jinja2 template with the given context.

    Args:
        template_name: Name of the template relative to src/formwire/templates/
        context: Dictionary of variables to pass to the template

    Returns:
        Rendered HTML string
    """
    template = _env.get_template(template_name)
    return template.render(**context)


def render_error_summary(
    attributes: str,
    header: str,
    lines: Sequence[str],
    footer: str,
    encode: bool = True,
) -> str:
    """Render the error summary container.

    ``attributes`` is a pre-rendered attribute string; ``header`` and
    ``footer`` are trusted HTML. Lines are escaped only when ``encode`` is set.
    """
    return render_template(
        "error_summary.html",
        {
            "attributes": attributes,
            "header": header,
            "lines": lines,
            "footer": footer,
            "encode": encode,
        },
    )
