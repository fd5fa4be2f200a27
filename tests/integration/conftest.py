# tests/integration/conftest.py
"""集成测试专用 fixtures.

提供注册了 HtmlForms 扩展与用户表单视图的 Flask 应用。
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from flask import Flask

from htmlform.extension import HtmlForms
from htmlform.form_model import FormModel
from htmlform.settings import Settings
from htmlform.views import FormModelView

PAGE_TEMPLATE = (
    "{% for message in get_flashed_messages() %}<p class=\"flash\">{{ message }}</p>{% endfor %}"
    "{{ form.render_styles() }}{{ form }}{{ form.render_scripts() }}"
)


class UserForm(FormModel):
    def setup(self) -> None:
        self.fields.text("name").required().max_length(40)
        self.fields.email("email").required().script("/static/email.js")
        self.buttons.submit("保存")


class InMemoryUserHandler:
    """以字典保存用户的处理器."""

    users: dict[int, SimpleNamespace] = {}

    def load(self, resource_id: int) -> SimpleNamespace | None:
        return self.users.get(resource_id)

    def save(self, data: dict[str, Any], resource: SimpleNamespace | None = None) -> SimpleNamespace:
        if resource is None:
            resource = SimpleNamespace(id=len(self.users) + 1)
            self.users[resource.id] = resource
        for key, value in data.items():
            setattr(resource, key, value)
        return resource


class UserFormView(FormModelView):
    form_model_class = UserForm
    handler_class = InMemoryUserHandler
    template = "users/form.html"
    success_message = "用户保存成功"
    redirect_endpoint = "users_index"


@pytest.fixture
def app(tmp_path):
    (tmp_path / "users").mkdir()
    (tmp_path / "users" / "form.html").write_text(PAGE_TEMPLATE, encoding="utf-8")

    app = Flask(__name__, template_folder=str(tmp_path))
    app.config.update(TESTING=True, SECRET_KEY="test-secret-key")
    HtmlForms(app, settings=Settings())

    app.add_url_rule("/users", "users_index", lambda: "users")
    app.add_url_rule("/users/new", view_func=UserFormView.as_view("user_create"))
    app.add_url_rule("/users/<int:user_id>/edit", view_func=UserFormView.as_view("user_edit"))

    InMemoryUserHandler.users.clear()
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users():
    return InMemoryUserHandler.users
