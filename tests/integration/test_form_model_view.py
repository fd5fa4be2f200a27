from types import SimpleNamespace

import pytest

from htmlform.extension import get_extension
from htmlform.form_model import FormModel


@pytest.mark.integration
def test_get_renders_creation_form(client) -> None:
    response = client.get("/users/new")
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '<form method="post">' in html
    assert 'name="name"' in html
    assert "_method" not in html
    assert '<script src="/static/email.js"></script>' in html


@pytest.mark.integration
def test_invalid_post_rerenders_with_errors_and_old_input(client, users) -> None:
    response = client.post("/users/new", data={"name": "Ada", "email": "nope"})
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '<p class="flash">数据验证失败</p>' in html
    assert 'value="Ada"' in html
    assert "邮箱格式不正确" in html
    assert users == {}


@pytest.mark.integration
def test_valid_post_creates_and_redirects(client, users) -> None:
    response = client.post("/users/new", data={"name": "Ada", "email": "ada@example.com"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/users")
    assert users[1].name == "Ada"
    assert users[1].email == "ada@example.com"


@pytest.mark.integration
def test_edit_form_is_prefilled_and_spoofs_put(client, users) -> None:
    users[1] = SimpleNamespace(id=1, name="Grace", email="grace@example.com")

    html = client.get("/users/1/edit").get_data(as_text=True)

    assert '<input type="hidden" name="_method" value="PUT">' in html
    assert 'value="Grace"' in html
    assert 'value="grace@example.com"' in html


@pytest.mark.integration
def test_update_post_saves_existing_resource(client, users) -> None:
    users[1] = SimpleNamespace(id=1, name="Grace", email="grace@example.com")

    response = client.post(
        "/users/1/edit",
        data={"_method": "PUT", "name": "Grace H", "email": "grace@example.com"},
    )

    assert response.status_code == 302
    assert users[1].name == "Grace H"
    assert len(users) == 1


@pytest.mark.integration
def test_extension_injects_current_request(app) -> None:
    with app.test_request_context("/search", method="POST", data={"q": "flask"}):

        class _SearchForm(FormModel):
            def setup(self) -> None:
                self.fields.text("q").required()

        form = get_extension().make(_SearchForm).using_method("get")

        assert form.validate() == {"q": "flask"}
        assert form.form.method == "GET"


@pytest.mark.integration
def test_edit_url_for_missing_resource_returns_404(client, users) -> None:
    assert client.get("/users/99/edit").status_code == 404

    response = client.post("/users/99/edit", data={"name": "Ghost", "email": "ghost@example.com"})

    assert response.status_code == 404
    assert users == {}
