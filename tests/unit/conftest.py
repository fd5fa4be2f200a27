# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供记录 setup 钩子调用的表单模型。
"""

from __future__ import annotations

import pytest

from htmlform.form_model import FormModel


class TrackingFormModel(FormModel):
    """记录每个 setup 钩子被调用的次数."""

    delegate_to_setup = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.hook_calls: list[str] = []

    def setup(self) -> None:
        self.hook_calls.append("setup")
        self.fields.text("name").required()

    def creation_setup(self) -> None:
        self.hook_calls.append("creation_setup")
        if self.delegate_to_setup:
            super().creation_setup()

    def update_setup(self) -> None:
        self.hook_calls.append("update_setup")
        if self.delegate_to_setup:
            super().update_setup()


@pytest.fixture
def make_form(form_builder, recording_theme, settings):
    """按需创建表单模型,默认使用记录型协作者."""

    def _make(form_class: type[FormModel] = TrackingFormModel, **kwargs) -> FormModel:
        kwargs.setdefault("settings", settings)
        return form_class(form_builder, kwargs.pop("theme", recording_theme), **kwargs)

    return _make
