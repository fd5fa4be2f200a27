"""FormBuilder: 按操作模式创建 Form 并记录绑定实体."""

from __future__ import annotations

from typing import TYPE_CHECKING

from htmlform.constants import HttpMethod
from htmlform.forms.form import Form
from htmlform.settings import Settings, get_settings
from htmlform.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from htmlform.types import FieldErrors, PayloadMapping

logger = get_logger("htmlform.forms.builder")


class FormBuilder:
    """Form 构建器.

    可在多个表单模型之间共享;``set_current_model`` 记录的实体会附加到
    之后构建的每一个 Form 上,直到被替换.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.current_model: object | None = None
        self.old_input: dict[str, object] = {}
        self.errors: FieldErrors = {}

    def set_current_model(self, model: object | None) -> None:
        """记录用于预填字段值的实体."""
        self.current_model = model

    def set_old_input(self, data: PayloadMapping | None) -> None:
        """记录上次提交失败时的输入,重新渲染时回填."""
        self.old_input = dict(data or {})

    def set_errors(self, errors: FieldErrors | None) -> None:
        """记录上次提交失败时的字段错误."""
        self.errors = {name: list(messages) for name, messages in (errors or {}).items()}

    def build(self, method: str) -> Form:
        """为给定的表单方法创建新的 Form.

        Args:
            method: 表单模型的方法,例如 "post"、"put";非 HTTP 方法的自定义模式按 POST 处理.

        Returns:
            Form: 全新构建的 Form 实例.

        """
        http_method = method.upper() if HttpMethod.is_valid(method) else HttpMethod.POST
        form = Form(
            http_method,
            model=self.current_model,
            old_input=self.old_input,
            errors=self.errors,
            novalidate=self.settings.novalidate,
        )
        logger.debug(
            "构建表单",
            module="forms",
            action="build",
            method=http_method,
            has_model=self.current_model is not None,
        )
        return form
