"""全局测试 fixtures: 隔离环境变量并提供可记录调用的协作者."""

from __future__ import annotations

from typing import Any

import pytest
from markupsafe import Markup

from htmlform.forms.builder import FormBuilder
from htmlform.forms.form import Form
from htmlform.settings import Settings, get_settings
from htmlform.theme import Theme


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """避免开发者本机的 HTMLFORM_* 环境变量影响测试."""
    for key in (
        "HTMLFORM_THEME",
        "HTMLFORM_DEFAULT_TEMPLATE",
        "HTMLFORM_TEMPLATE_DIRS",
        "HTMLFORM_NOVALIDATE",
        "HTMLFORM_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class RecordingFormBuilder(FormBuilder):
    """记录 build 调用次数与参数的 FormBuilder."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__(settings or Settings())
        self.build_calls: list[str] = []

    def build(self, method: str) -> Form:
        self.build_calls.append(method)
        return super().build(method)


class RecordingTheme:
    """只记录模板标识与上下文的主题桩."""

    def __init__(self) -> None:
        self.renders: list[tuple[str, dict[str, Any]]] = []

    def render(self, template: str, context: dict[str, Any]) -> Markup:
        self.renders.append((template, context))
        return Markup("<rendered {}>").format(template)

    def script_tag(self, url: str) -> Markup:
        return Markup('<script src="{}"></script>').format(url)

    def style_tag(self, url: str) -> Markup:
        return Markup('<link href="{}" rel="stylesheet">').format(url)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def form_builder(settings) -> RecordingFormBuilder:
    return RecordingFormBuilder(settings)


@pytest.fixture
def recording_theme() -> RecordingTheme:
    return RecordingTheme()


@pytest.fixture
def theme(settings) -> Theme:
    return Theme(settings)
