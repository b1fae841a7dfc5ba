import pytest

from formwire import FormModel
from formwire.html import (
    add_css_class,
    add_css_style,
    begin_form,
    encode,
    get_attribute_value,
    get_input_id,
    get_input_name,
    parse_attribute,
    render_tag_attributes,
    tag,
)


class LoginForm(FormModel):
    pass


class Anonymous(FormModel):
    def form_name(self) -> str:
        return ""


def test_encode():
    assert encode('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"
    assert encode(42) == "42"


@pytest.mark.parametrize(
    "attribute, expected",
    [
        ("name", ("", "name", "")),
        ("[0]name", ("[0]", "name", "")),
        ("dates[0]", ("", "dates", "[0]")),
        ("[0]dates[]", ("[0]", "dates", "[]")),
        ("[a][b]c[d]", ("[a][b]", "c", "[d]")),
    ],
)
def test_parse_attribute(attribute, expected):
    assert parse_attribute(attribute) == expected


def test_parse_attribute_rejects_garbage():
    with pytest.raises(ValueError):
        parse_attribute("[0]")


@pytest.mark.parametrize(
    "attribute, name, input_id",
    [
        ("username", "LoginForm[username]", "loginform-username"),
        ("[0]username", "LoginForm[0][username]", "loginform-0-username"),
        ("dates[]", "LoginForm[dates][]", "loginform-dates"),
        ("[1]dates[2]", "LoginForm[1][dates][2]", "loginform-1-dates-2"),
    ],
)
def test_input_name_and_id(attribute, name, input_id):
    model = LoginForm()
    assert get_input_name(model, attribute) == name
    assert get_input_id(model, attribute) == input_id


def test_input_name_without_form_name():
    model = Anonymous()
    assert get_input_name(model, "username") == "username"
    assert get_input_id(model, "username") == "username"
    with pytest.raises(ValueError):
        get_input_name(model, "[0]username")


def test_attribute_value_follows_indexes():
    model = LoginForm(dates=["mon", "tue"], meta={"lang": "en"})
    assert get_attribute_value(model, "dates[1]") == "tue"
    assert get_attribute_value(model, "dates[5]") is None
    assert get_attribute_value(model, "[0]meta[lang]") == "en"
    assert get_attribute_value(model, "missing") is None


def test_render_tag_attributes():
    html = render_tag_attributes(
        {
            "data": {"id": 3, "tags": ["a"], "on": True},
            "disabled": True,
            "hidden": False,
            "title": None,
            "class": ["a", "b"],
            "id": "x",
        }
    )
    assert html == ' id="x" class="a b" disabled data-id="3" data-tags="[&quot;a&quot;]" data-on="true"'


def test_tag_and_void_elements():
    assert tag("span", "hi", {"class": "c"}) == '<span class="c">hi</span>'
    assert tag("br") == "<br>"


def test_css_class_helpers():
    options = {"class": "a b"}
    add_css_class(options, "b c")
    assert options["class"] == "a b c"
    add_css_class(options, ["d"])
    assert options["class"] == "a b c d"

    options = {"class": ["a"]}
    add_css_class(options, "a d")
    assert options["class"] == ["a", "d"]


def test_css_style_helper():
    options = {"style": "color: red;"}
    add_css_style(options, "display:none")
    assert options["style"] == "color: red; display: none;"
    add_css_style(options, {"color": "blue"}, overwrite=False)
    assert options["style"] == "color: red; display: none;"


def test_begin_form_keeps_fragment_for_get_forms():
    html = begin_form("/find?q=1#results", "get")
    assert html.startswith('<form action="/find#results" method="get">')
    assert '<input type="hidden" name="q" value="1">' in html


def test_begin_form_post_keeps_query():
    assert begin_form("/save?draft=1") == '<form action="/save?draft=1" method="post">'
