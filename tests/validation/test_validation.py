import pytest

from taskhub.core import IntegerField, Model, StringField
from taskhub.validation import NON_FIELD_ERRORS, REQUIRED_MESSAGE, ValidationError


def no_spaces(value):
    if " " in value:
        raise ValueError("Spaces are not allowed.")


class Login(Model):
    username = StringField(nullable=False, validators=[no_spaces])
    attempts = IntegerField(default=0)


def test_field_validator_error():
    login = Login(username="ada lovelace")
    with pytest.raises(ValidationError) as excinfo:
        login.full_clean()
    assert excinfo.value.errors == {"username": ["Spaces are not allowed."]}
    assert str(excinfo.value) == "Login: username: Spaces are not allowed."


def test_missing_required_value():
    with pytest.raises(ValidationError) as excinfo:
        Login().full_clean()
    assert excinfo.value.errors["username"] == [REQUIRED_MESSAGE]
    assert excinfo.value.fields == ["username"]


def test_model_clean_hook():
    class Registration(Model):
        email = StringField(nullable=False)
        confirm_email = StringField(nullable=False)

        def clean(self):
            if self.email != self.confirm_email:
                raise ValueError("Emails must match.")

    registration = Registration(email="a@example.com", confirm_email="b@example.com")
    with pytest.raises(ValidationError) as excinfo:
        registration.full_clean()
    assert excinfo.value.errors == {NON_FIELD_ERRORS: ["Emails must match."]}
    assert excinfo.value.fields == []


def test_errors_are_aggregated():
    class Shift(Model):
        start = StringField(nullable=False)
        end = StringField(nullable=False)

    with pytest.raises(ValidationError) as excinfo:
        Shift().full_clean()
    assert excinfo.value.fields == ["start", "end"]


def test_nullable_fields_pass():
    class Nickname(Model):
        nickname = StringField(nullable=True)

    Nickname().full_clean()
