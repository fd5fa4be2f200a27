"""系统级常量: 错误分类、严重度与默认错误文案."""

from enum import Enum


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    TEMPLATE = "template"
    FORWARDING = "forwarding"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# 错误消息常量
class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    INVALID_REQUEST = "无效的请求"

    # 表单模型
    UNKNOWN_OPERATION = "表单模型不支持该操作"
    UNKNOWN_FIELD = "字段不存在"
    MISSING_INPUT = "缺少待校验的输入数据"
    UNKNOWN_VALIDATION_RULE = "不支持的校验规则"

    # 模板与主题
    TEMPLATE_NOT_FOUND = "模板不存在"
