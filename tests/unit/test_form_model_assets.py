import pytest

from htmlform.form_model import FormModel


class _AssetForm(FormModel):
    def setup(self) -> None:
        self.fields.text("first").script("a.js", "b.js").style("base.css")
        self.fields.text("second").script("b.js", "c.js").style("base.css", "picker.css")
        self.fields.group("extra", build=lambda fields: fields.text("nested").script("nested.js"))


@pytest.mark.unit
def test_scripts_are_deduplicated_in_first_seen_order(make_form) -> None:
    form = make_form(_AssetForm)

    assert form.scripts() == ["a.js", "b.js", "c.js"]
    assert form.scripts() == ["a.js", "b.js", "c.js"]


@pytest.mark.unit
def test_styles_skip_groups(make_form) -> None:
    form = make_form(_AssetForm)

    assert form.styles() == ["base.css", "picker.css"]


@pytest.mark.unit
def test_render_scripts_concatenates_tags(make_form) -> None:
    form = make_form(_AssetForm)

    markup = form.render_scripts()

    assert str(markup) == (
        '<script src="a.js"></script><script src="b.js"></script><script src="c.js"></script>'
    )
    assert hasattr(markup, "__html__")


@pytest.mark.unit
def test_render_styles_uses_link_tags(make_form) -> None:
    form = make_form(_AssetForm)

    assert str(form.render_styles()) == (
        '<link href="base.css" rel="stylesheet"><link href="picker.css" rel="stylesheet">'
    )


@pytest.mark.unit
def test_form_without_fields_has_no_assets(make_form) -> None:
    form = make_form(FormModel)

    assert form.scripts() == []
    assert str(form.render_styles()) == ""


@pytest.mark.unit
def test_repeated_render_and_scripts_are_stable(make_form, theme, form_builder) -> None:
    form = make_form(_AssetForm, theme=theme)

    first = form.render()
    scripts = form.scripts()
    second = form.render()

    assert first == second
    assert scripts == form.scripts()
    assert len(form_builder.build_calls) == 1
