from types import SimpleNamespace

import pytest

from htmlform.errors import TemplateNotFoundError
from htmlform.form_model import FormModel


class _UserForm(FormModel):
    def setup(self) -> None:
        self.fields.text("name", label="姓名").required().max_length(50)
        self.fields.email("email").placeholder("you@example.com")
        self.fields.select("role", {"admin": "管理员", "user": "普通用户"})
        self.fields.checkbox("active")
        self.buttons.submit("保存")

    def update_setup(self) -> None:
        self.setup()
        self.fields.hidden("id")


@pytest.mark.unit
def test_render_uses_default_template(make_form, recording_theme) -> None:
    make_form().render()

    template, context = recording_theme.renders[-1]
    assert template == "@form"
    assert set(context) == {"form", "fields", "buttons"}


@pytest.mark.unit
def test_stored_template_overrides_default(make_form, recording_theme) -> None:
    form = make_form().template("@custom")

    form.render()

    assert recording_theme.renders[-1][0] == "@custom"


@pytest.mark.unit
def test_render_argument_overrides_stored_template(make_form, recording_theme) -> None:
    form = make_form().template("@custom")

    form.render("@override")

    assert recording_theme.renders[-1][0] == "@override"


@pytest.mark.unit
def test_to_html_and_html_protocol_render(make_form, recording_theme) -> None:
    form = make_form()

    assert str(form.to_html()) == "<rendered @form>"
    assert form.__html__() == "<rendered @form>"
    assert len(recording_theme.renders) == 2


@pytest.mark.unit
def test_bundled_theme_renders_fields_and_buttons(make_form, theme) -> None:
    html = str(make_form(_UserForm, theme=theme).render())

    assert html.startswith('<form method="post">')
    assert 'name="name"' in html
    assert "maxlength=\"50\"" in html
    assert "required" in html
    assert 'placeholder="you@example.com"' in html
    assert '<option value="admin">管理员</option>' in html
    assert 'type="checkbox"' in html
    assert '<button type="submit" name="submit"' in html
    assert html.rstrip().endswith("</form>")


@pytest.mark.unit
def test_update_form_spoofs_method_and_prefills_model(make_form, theme) -> None:
    user = SimpleNamespace(id=7, name="Ada <admin>", email="ada@example.com", role="admin", active=True)

    html = str(make_form(_UserForm, theme=theme).for_update().model(user).render())

    assert '<input type="hidden" name="_method" value="PUT">' in html
    assert 'value="Ada &lt;admin&gt;"' in html
    assert '<option value="admin" selected>' in html
    assert "checked" in html
    assert 'name="id"' in html


@pytest.mark.unit
def test_novalidate_attribute_is_rendered(make_form, theme) -> None:
    html = str(make_form(_UserForm, theme=theme).novalidate().render())

    assert html.startswith('<form method="post" novalidate>')


@pytest.mark.unit
def test_old_input_and_errors_are_rendered(make_form, theme, form_builder) -> None:
    form_builder.set_old_input({"name": "typed"})
    form_builder.set_errors({"email": ["邮箱格式不正确"]})

    html = str(make_form(_UserForm, theme=theme).render())

    assert 'value="typed"' in html
    assert "is-invalid" in html
    assert '<div class="invalid-feedback">邮箱格式不正确</div>' in html


@pytest.mark.unit
def test_groups_render_as_fieldsets(make_form, theme) -> None:
    class _GroupedForm(FormModel):
        def setup(self) -> None:
            self.fields.group("address", "地址", build=lambda fields: fields.text("city"))

    html = str(make_form(_GroupedForm, theme=theme).render())

    assert '<fieldset id="group_address">' in html
    assert "<legend>地址</legend>" in html
    assert 'name="city"' in html


@pytest.mark.unit
def test_unknown_template_raises(make_form, theme) -> None:
    with pytest.raises(TemplateNotFoundError) as excinfo:
        make_form(_UserForm, theme=theme).render("@missing")

    assert excinfo.value.message_key == "TEMPLATE_NOT_FOUND"
