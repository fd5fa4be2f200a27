"""校验规则描述符解析.

描述符形如 ``required``、``max:255``、``in:a,b,c``、``regex:^[a-z]+$``.
"""

from __future__ import annotations

from dataclasses import dataclass

from htmlform.errors import ConfigurationError

KNOWN_RULES = frozenset(
    {
        "required",
        "nullable",
        "email",
        "url",
        "numeric",
        "integer",
        "boolean",
        "min",
        "max",
        "in",
        "regex",
        "confirmed",
    },
)

# 需要参数的规则
PARAMETRIZED_RULES = frozenset({"min", "max", "in", "regex"})


@dataclass(frozen=True, slots=True)
class ParsedRule:
    """解析后的规则."""

    name: str
    argument: str | None = None

    @property
    def number(self) -> int | float:
        """把参数解析为数值,用于 min/max,整数参数保持为 int."""
        try:
            value = float(self.argument or "")
        except ValueError:
            msg = f"规则参数必须是数字: {self.name}:{self.argument}"
            raise ConfigurationError(msg, message_key="UNKNOWN_VALIDATION_RULE") from None
        return int(value) if value.is_integer() else value

    @property
    def choices(self) -> tuple[str, ...]:
        return tuple(item.strip() for item in (self.argument or "").split(",") if item.strip())


def parse_rule(descriptor: str) -> ParsedRule:
    """解析单条规则描述符.

    Args:
        descriptor: 规则描述符.

    Returns:
        ParsedRule: 规则名与参数.

    Raises:
        ConfigurationError: 未知规则或缺少参数时抛出.

    """
    name, separator, argument = descriptor.strip().partition(":")
    name = name.strip().lower()
    if name not in KNOWN_RULES:
        msg = f"不支持的校验规则: {descriptor}"
        raise ConfigurationError(msg, message_key="UNKNOWN_VALIDATION_RULE", extra={"rule": descriptor})
    if name in PARAMETRIZED_RULES and not (separator and argument):
        msg = f"校验规则缺少参数: {descriptor}"
        raise ConfigurationError(msg, message_key="UNKNOWN_VALIDATION_RULE", extra={"rule": descriptor})
    return ParsedRule(name=name, argument=argument if separator else None)
