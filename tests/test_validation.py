import json

from pydantic import BaseModel, model_validator
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from formwire import ActiveForm, FormModel, is_validation_request, validate, validate_multiple, validation_response

from conftest import Profile, User


def test_validate_multiple_example():
    result = validate_multiple([User(name=""), User(name="ok")])
    assert result == {"user-0-name": ["Name cannot be blank."]}


def test_validate_single_model():
    assert validate(User(name="")) == {"user-name": ["Name cannot be blank."]}
    assert validate(User(name="ok")) == {}


def test_missing_required_attribute_is_reported():
    profile = Profile()
    assert validate(profile) == {"profile-bio": ["About you cannot be blank."]}


def test_attribute_filter_never_adds_ids():
    profile = Profile(age="not a number")
    everything = validate(profile)
    assert set(everything) == {"profile-bio", "profile-age"}

    for attributes in (["bio"], ["age"], "age", []):
        filtered = validate(profile, attributes)
        assert set(filtered) <= set(everything)

    assert set(validate(profile, ["age"])) == {"profile-age"}
    assert validate(profile, []) == {}


def test_validate_several_models_together():
    result = validate(User(name=""), Profile(age=3))
    assert result == {
        "user-name": ["Name cannot be blank."],
        "profile-bio": ["About you cannot be blank."],
    }


def test_multiple_models_are_namespaced_by_index():
    result = validate_multiple([User(name=""), User(name=" "), User(name="ok")])
    assert set(result) == {"user-0-name", "user-1-name"}


def test_validate_multiple_with_attribute_filter():
    profiles = [Profile(), Profile(bio="x", age="?")]
    assert set(validate_multiple(profiles)) == {"profile-0-bio", "profile-1-age"}
    assert set(validate_multiple(profiles, ["age"])) == {"profile-1-age"}


def test_validation_updates_model_errors():
    user = User(name="")
    assert not user.has_errors()
    validate(user)
    assert user.get_errors() == {"name": ["Name cannot be blank."]}

    user.name = "fixed"
    validate(user)
    assert not user.has_errors()


class SignupSchema(BaseModel):
    password: str
    confirm: str

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupSchema":
        if self.password != self.confirm:
            raise ValueError("Passwords do not match.")
        return self


class Signup(FormModel):
    schema = SignupSchema


class ConfirmedSignup(Signup):
    model_error_attribute = "confirm"


def test_model_level_errors_land_on_first_validated_attribute():
    signup = Signup(password="a", confirm="b")
    assert validate(signup) == {"signup-password": ["Passwords do not match."]}
    assert signup.validate() is False
    assert validate(signup, ["confirm"]) == {"signup-confirm": ["Passwords do not match."]}


def test_model_level_errors_use_declared_attribute():
    signup = ConfirmedSignup(password="a", confirm="b")
    assert validate(signup) == {"confirmedsignup-confirm": ["Passwords do not match."]}
    assert validate(signup, ["password"]) == {}
    assert validate(ConfirmedSignup(password="a", confirm="a")) == {}


def test_static_aliases_on_form():
    assert ActiveForm.validate(User(name="")) == {"user-name": ["Name cannot be blank."]}
    assert ActiveForm.validate_multiple([User(name="")]) == {"user-0-name": ["Name cannot be blank."]}


def test_validation_response_is_json():
    response = validation_response(validate(User(name="")))
    assert response.media_type == "application/json"
    assert json.loads(response.body) == {"user-name": ["Name cannot be blank."]}


async def signup(request: Request):
    data = await request.form()
    user = User(name=data.get("User[name]", ""))
    if await is_validation_request(request):
        return validation_response(validate(user))
    return PlainTextResponse("saved")


def make_client() -> TestClient:
    app = Starlette(routes=[Route("/signup", signup, methods=["POST"])])
    return TestClient(app)


def test_ajax_validation_round_trip_via_form_body():
    client = make_client()
    response = client.post("/signup", data={"User[name]": "", "ajax": "signup"})
    assert response.status_code == 200
    assert response.json() == {"user-name": ["Name cannot be blank."]}


def test_ajax_validation_round_trip_via_query():
    client = make_client()
    response = client.post("/signup?ajax=signup", data={"User[name]": "Ada"})
    assert response.json() == {}


def test_regular_submit_is_not_a_validation_request():
    client = make_client()
    response = client.post("/signup", data={"User[name]": "Ada"})
    assert response.text == "saved"
