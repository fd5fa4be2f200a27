"""HTTP方法常量.

定义表单可用的HTTP请求方法与表单模型的操作模式,避免魔法字符串.
"""

from enum import Enum
from typing import ClassVar


class HttpMethod:
    """HTTP方法常量.

    浏览器的 ``<form>`` 只能提交 GET/POST,其余方法通过 ``_method`` 隐藏字段伪装.
    """

    GET: ClassVar[str] = "GET"           # 查询类表单
    POST: ClassVar[str] = "POST"         # 创建资源
    PUT: ClassVar[str] = "PUT"           # 更新资源(完整)
    PATCH: ClassVar[str] = "PATCH"       # 更新资源(部分)
    DELETE: ClassVar[str] = "DELETE"     # 删除资源

    ALL: ClassVar[tuple[str, ...]] = (GET, POST, PUT, PATCH, DELETE)

    # 浏览器原生支持的表单方法
    BROWSER_METHODS: ClassVar[tuple[str, ...]] = (GET, POST)

    SPOOF_FIELD: ClassVar[str] = "_method"

    @classmethod
    def is_valid(cls, method: str) -> bool:
        """判断HTTP方法是否有效.

        Args:
            method: HTTP方法字符串

        Returns:
            bool: 是否为有效方法

        """
        return method.upper() in cls.ALL

    @classmethod
    def needs_spoofing(cls, method: str) -> bool:
        """判断方法是否需要通过隐藏字段伪装.

        Args:
            method: HTTP方法字符串

        Returns:
            bool: 不被浏览器原生支持时返回 True

        """
        return method.upper() not in cls.BROWSER_METHODS

    @classmethod
    def browser_method(cls, method: str) -> str:
        """返回浏览器实际提交使用的方法."""
        normalized = method.upper()
        return normalized if normalized in cls.BROWSER_METHODS else cls.POST


class SetupMode(str, Enum):
    """表单模型的操作模式.

    值与表单模型的 ``method`` 一致,``GENERIC`` 表示其他任意方法.
    """

    CREATE = "post"
    UPDATE = "put"
    GENERIC = "generic"

    @classmethod
    def from_method(cls, method: str) -> "SetupMode":
        """根据表单方法推导操作模式.

        Args:
            method: 表单模型当前配置的方法,大小写不敏感.

        Returns:
            SetupMode: post 对应 CREATE,put 对应 UPDATE,其余均为 GENERIC.

        """
        normalized = (method or "").strip().lower()
        if normalized == cls.CREATE.value:
            return cls.CREATE
        if normalized == cls.UPDATE.value:
            return cls.UPDATE
        return cls.GENERIC
