from typing import Any, ClassVar, cast

import pytest

from htmlform.errors import AppError, UnknownFieldError, UnknownOperationError
from htmlform.fields.buttons import ButtonCollection
from htmlform.form_model import FormModel
from htmlform.forms.form import Form


class _SharedNameForm(Form):
    forwarded_operations: ClassVar[frozenset[str]] = Form.forwarded_operations | {"shared"}

    def shared(self) -> str:
        return "form"


class _SharedNameButtons(ButtonCollection):
    forwarded_operations: ClassVar[frozenset[str]] = ButtonCollection.forwarded_operations | {"shared"}

    def shared(self) -> str:
        return "buttons"


class _FieldsForm(FormModel):
    def setup(self) -> None:
        self.fields.text("title")
        self.fields.group("meta")


@pytest.mark.unit
def test_form_wins_over_buttons(make_form, form_builder, monkeypatch) -> None:
    monkeypatch.setattr(form_builder, "build", lambda method: _SharedNameForm(method))
    form = make_form(_FieldsForm, buttons=_SharedNameButtons())

    assert form.call("shared") == "form"


@pytest.mark.unit
def test_buttons_resolve_before_fields(make_form) -> None:
    form = make_form(_FieldsForm)

    button = form.call("submit", "保存")

    assert button.type == "submit"
    assert "submit" in form.buttons


@pytest.mark.unit
def test_field_only_operations_reach_field_collection(make_form) -> None:
    form = make_form(_FieldsForm)

    field = form.call("email", "contact")

    assert field.type == "email"
    assert "contact" in form.fields


@pytest.mark.unit
def test_unknown_operation_raises(make_form) -> None:
    form = make_form(_FieldsForm)

    with pytest.raises(UnknownOperationError) as excinfo:
        form.call("explode")

    assert isinstance(excinfo.value, AttributeError)
    assert isinstance(excinfo.value, AppError)
    assert excinfo.value.extra == {"operation": "explode"}


@pytest.mark.unit
def test_private_attributes_are_not_forwarded(make_form) -> None:
    with pytest.raises(UnknownOperationError):
        make_form(_FieldsForm).call("_entries")


@pytest.mark.unit
def test_named_pass_throughs_return_form_model(make_form) -> None:
    form = make_form(_FieldsForm)

    assert form.action("/save").attr("data-role", "editor").classes("card") is form
    assert form.form.attributes == {"data-role": "editor", "class": "card"}


@pytest.mark.unit
def test_field_lookup_by_name(make_form) -> None:
    form = make_form(_FieldsForm)

    assert form.field("title").name == "title"
    assert form["meta"].is_field is False


@pytest.mark.unit
def test_unknown_field_raises(make_form) -> None:
    form = make_form(_FieldsForm)

    with pytest.raises(UnknownFieldError) as excinfo:
        form.field("missing")

    assert isinstance(excinfo.value, KeyError)
    assert str(excinfo.value) == "字段不存在: missing"
    assert cast(Any, excinfo.value).message_key == "UNKNOWN_FIELD"


@pytest.mark.unit
def test_add_declares_a_field_not_a_button(make_form) -> None:
    form = make_form(_FieldsForm)

    field = form.add("summary", "textarea")

    assert field.type == "textarea"
    assert "summary" in form.fields
    assert "summary" not in form.buttons


@pytest.mark.unit
def test_named_field_declarations_reach_field_collection(make_form) -> None:
    form = make_form(_FieldsForm)

    text = form.text("nickname")
    choice = form.select("role", {"admin": "管理员", "user": "用户"})
    group = form.group("address", "地址", lambda fields: fields.text("city"))

    assert text.type == "text"
    assert choice.type == "select"
    assert choice.options == {"admin": "管理员", "user": "用户"}
    assert group.is_field is False
    assert "city" in group.fields
    assert list(form.fields.all()) == ["title", "meta", "nickname", "role", "address"]
    assert len(form.buttons) == 0


@pytest.mark.unit
def test_add_is_not_forwarded_to_buttons(make_form) -> None:
    form = make_form(_FieldsForm)

    form.call("add", "body")

    assert "body" in form.fields
    assert "body" not in form.buttons
