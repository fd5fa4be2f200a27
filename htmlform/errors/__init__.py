"""htmlform - 统一异常定义.

集中维护表单模型相关的异常类型、严重度与 HTTP 状态码映射.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from werkzeug.exceptions import HTTPException

from htmlform.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from collections.abc import Mapping

    from htmlform.types import FieldErrors, LoggerExtra


@dataclass(frozen=True, slots=True)
class ExceptionMetadata:
    """异常的元信息."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str

    @property
    def default_message(self) -> str:
        """根据 message key 获取默认文案.

        Returns:
            str: 对应 `ErrorMessages` 中的默认消息.

        """
        return getattr(ErrorMessages, self.default_message_key, ErrorMessages.INTERNAL_ERROR)


class AppError(Exception):
    """统一的基础异常.

    Args:
        message: 自定义错误文案,若为空则根据 ``message_key`` 推导.
        message_key: 自定义消息键.
        extra: 结构化日志附加字段.
        severity: 错误严重度.
        category: 错误分类.
        status_code: 覆盖默认 HTTP 状态码.

    """

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or getattr(ErrorMessages, self.message_key, ErrorMessages.INTERNAL_ERROR)
        self.extra = dict(extra or {})
        self._severity = severity or self.metadata.severity
        self._category = category or self.metadata.category
        self._status_code = status_code or self.metadata.status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    @property
    def severity(self) -> ErrorSeverity:
        """返回异常实例对应的严重度."""
        return self._severity

    @property
    def category(self) -> ErrorCategory:
        """返回异常所属的分类."""
        return self._category

    @property
    def status_code(self) -> int:
        """返回异常对应的 HTTP 状态码."""
        return self._status_code

    @property
    def recoverable(self) -> bool:
        """严重度为 LOW 或 MEDIUM 时为 True."""
        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)


class ValidationError(AppError):
    """表示输入数据未通过字段校验规则.

    由校验器抛出,表单模型只负责触发,不做转换,默认返回 400.

    Attributes:
        errors: 字段名到错误文案列表的映射.
        data: 触发校验失败的原始输入.

    """

    metadata = ExceptionMetadata(
        status_code=400,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="VALIDATION_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: FieldErrors | None = None,
        data: Mapping[str, object] | None = None,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
    ) -> None:
        self.errors: FieldErrors = {name: list(messages) for name, messages in (errors or {}).items()}
        self.data: dict[str, object] = dict(data or {})
        super().__init__(message, message_key=message_key, extra=extra)

    def first_error(self, name: str) -> str | None:
        """返回某字段的第一条错误文案,无错误时返回 None."""
        messages = self.errors.get(name)
        return messages[0] if messages else None


class UnknownOperationError(AppError, AttributeError):
    """转发的操作在 Form、按钮集合与字段集合上均不存在."""

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.FORWARDING,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="UNKNOWN_OPERATION",
    )


class UnknownFieldError(AppError, KeyError):
    """按名称查找字段时未命中."""

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.FORWARDING,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="UNKNOWN_FIELD",
    )


class MissingInputError(AppError):
    """校验时既未显式传入数据,也没有注入请求上下文."""

    metadata = ExceptionMetadata(
        status_code=400,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="MISSING_INPUT",
    )


class TemplateNotFoundError(AppError):
    """主题无法解析模板标识."""

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.TEMPLATE,
        severity=ErrorSeverity.HIGH,
        default_message_key="TEMPLATE_NOT_FOUND",
    )


class ConfigurationError(AppError):
    """配置项非法,例如未知规则或缺失主题."""

    metadata = ExceptionMetadata(
        status_code=500,
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )


def map_exception_to_status(error: Exception, default: int = 500) -> int:
    """根据异常类型推导 HTTP 状态码.

    Args:
        error: 捕获到的异常对象.
        default: 无法匹配时的默认状态码.

    Returns:
        int: 与异常对应的 HTTP 状态码.

    """
    if isinstance(error, AppError):
        return error.status_code

    if isinstance(error, HTTPException):
        code = getattr(error, "code", None)
        if code is not None:
            return int(code)

    return default


__all__ = [
    "AppError",
    "ConfigurationError",
    "ExceptionMetadata",
    "MissingInputError",
    "TemplateNotFoundError",
    "UnknownFieldError",
    "UnknownOperationError",
    "ValidationError",
    "map_exception_to_status",
]
