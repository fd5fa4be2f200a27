"""基于 pydantic 的校验器.

把字段规则映射编译为动态 pydantic 模型执行校验,并把 pydantic 的错误
转换为 ``htmlform.errors.ValidationError``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Annotated, Any, Optional
from urllib.parse import urlparse

import annotated_types
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field as SchemaField,
    ValidationError as PydanticValidationError,
    create_model,
)

from htmlform.errors import ValidationError
from htmlform.utils.structlog_config import log_with_context
from htmlform.validation.payload import extract_payload
from htmlform.validation.rules import ParsedRule, parse_rule

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from htmlform.types import FieldErrors, ValidationRules

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CONFIRMATION_SUFFIX = "_confirmation"


class _FormSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, str_strip_whitespace=True)


def _check_email(value: str) -> str:
    if not _EMAIL_PATTERN.match(value):
        raise ValueError("邮箱格式不正确")
    return value


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("URL 格式不正确")
    return value


def _check_choices(choices: tuple[str, ...]) -> Callable[[Any], Any]:
    def _validator(value: Any) -> Any:
        if str(value) not in choices:
            raise ValueError("选项不在允许范围内")
        return value

    return _validator


def _check_pattern(pattern: str) -> Callable[[str], str]:
    compiled = re.compile(pattern)

    def _validator(value: str) -> str:
        if not compiled.search(value):
            raise ValueError("格式不正确")
        return value

    return _validator


def _build_annotation(rules: list[ParsedRule]) -> tuple[Any, bool]:
    """把一组规则转换为 pydantic 字段注解.

    Returns:
        (注解, 是否必填)

    """
    names = {rule.name for rule in rules}
    if "integer" in names:
        base: Any = int
    elif "numeric" in names:
        base = float
    elif "boolean" in names:
        base = bool
    else:
        base = str
    is_number = base in (int, float)

    metadata: list[Any] = []
    for rule in rules:
        if rule.name == "min":
            metadata.append(annotated_types.Ge(rule.number) if is_number else annotated_types.MinLen(int(rule.number)))
        elif rule.name == "max":
            metadata.append(annotated_types.Le(rule.number) if is_number else annotated_types.MaxLen(int(rule.number)))
        elif rule.name == "email":
            metadata.append(AfterValidator(_check_email))
        elif rule.name == "url":
            metadata.append(AfterValidator(_check_url))
        elif rule.name == "in":
            metadata.append(AfterValidator(_check_choices(rule.choices)))
        elif rule.name == "regex":
            metadata.append(AfterValidator(_check_pattern(rule.argument or "")))

    annotation = Annotated[(base, *metadata)] if metadata else base
    return annotation, "required" in names


def _normalize_input(data: Mapping[str, Any]) -> dict[str, Any]:
    # 浏览器提交的空字符串视为未填写
    return {key: value for key, value in data.items() if not (isinstance(value, str) and not value.strip())}


class Validator:
    """规则映射校验器.

    Example:
        >>> Validator().validate({"email": "a@b.co"}, {"email": ["required", "email"]})
        {'email': 'a@b.co'}

    """

    def compile(self, rules: ValidationRules) -> type[BaseModel]:
        """把规则映射编译为 pydantic 模型.

        模型属性使用内部名称,表单字段名只作为别名,
        ``_next``、``model_config`` 这类名称不会与 pydantic 自身的属性冲突.
        """
        definitions: dict[str, Any] = {}
        for index, (name, descriptors) in enumerate(rules.items()):
            annotation, required = _build_annotation([parse_rule(item) for item in descriptors])
            if required:
                definitions[f"field_{index}"] = (annotation, SchemaField(..., alias=name))
            else:
                definitions[f"field_{index}"] = (Optional[annotation], SchemaField(None, alias=name))
        return create_model("FormInput", __base__=_FormSchema, **definitions)

    def validate(self, source: object, rules: ValidationRules) -> dict[str, Any]:
        """按规则校验输入.

        Args:
            source: 请求对象或映射.
            rules: 字段名到规则描述符列表的映射.

        Returns:
            dict: 通过校验的数据,只包含规则中声明的字段.

        Raises:
            ValidationError: 任一字段未通过校验时抛出,``errors`` 包含全部字段错误.

        """
        raw = extract_payload(source)
        data = _normalize_input(raw)
        schema = self.compile(rules)
        errors: FieldErrors = {}
        validated: dict[str, Any] = {}
        try:
            validated = schema.model_validate(data).model_dump(by_alias=True)
        except PydanticValidationError as exc:
            errors = _collect_errors(exc)

        for name, descriptors in rules.items():
            confirmation = raw.get(f"{name}{CONFIRMATION_SUFFIX}")
            if "confirmed" in descriptors and name in data and data.get(name) != confirmation:
                errors.setdefault(name, []).append(f"{name}两次输入不一致")

        if errors:
            log_with_context(
                "warning",
                "表单校验失败",
                module="validation",
                action="validate",
                context={"fields": sorted(errors)},
            )
            raise ValidationError(errors=errors, data=raw)
        return validated


def _collect_errors(exc: PydanticValidationError) -> FieldErrors:
    errors: FieldErrors = {}
    for item in exc.errors():
        loc = item.get("loc")
        field = str(loc[0]) if isinstance(loc, tuple) and loc else "__all__"
        errors.setdefault(field, []).append(_error_message(field, item))
    return errors


def _error_message(field: str, item: Mapping[str, Any]) -> str:
    if item.get("type") == "missing":
        return f"{field}不能为空"
    ctx = item.get("ctx")
    if isinstance(ctx, dict) and isinstance(ctx.get("error"), BaseException):
        return str(ctx["error"])
    msg = item.get("msg")
    if isinstance(msg, str) and msg.strip():
        return msg
    return "参数校验失败"
