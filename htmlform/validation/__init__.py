"""校验规则解析与执行."""

from .payload import extract_payload
from .rules import ParsedRule, parse_rule
from .validator import Validator

__all__ = ["ParsedRule", "Validator", "extract_payload", "parse_rule"]
