from typing import Optional

import pytest
from pydantic import BaseModel, field_validator

from formwire import ActiveForm, Dispatcher, FormModel


class UserSchema(BaseModel):
    name: str
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name cannot be blank.")
        return value


class User(FormModel):
    schema = UserSchema


class ProfileSchema(BaseModel):
    bio: str
    age: int = 0


class Profile(FormModel):
    schema = ProfileSchema
    labels = {"bio": "About you"}


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher()


@pytest.fixture
def form(dispatcher: Dispatcher) -> ActiveForm:
    return ActiveForm(action="/signup", options={"id": "signup"}, dispatcher=dispatcher)


@pytest.fixture
def valid_user() -> User:
    return User(name="ok", email="ok@example.com")


@pytest.fixture
def blank_user() -> User:
    return User(name="")
