"""htmlform 的结构化日志配置与辅助函数."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Literal, cast

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from structlog.typing import Processor

    from htmlform.types import ContextDict, LoggerExtra

LogLevel = Literal["debug", "info", "warning", "error", "critical"]

PACKAGE_NAME = "htmlform"


class StructlogConfig:
    """structlog 配置核心类.

    负责配置处理器链与日志工厂,可多次调用,只会配置一次.

    Attributes:
        configured: 是否已配置标志.
        level: 当前生效的最低日志级别.

    Example:
        >>> config = StructlogConfig()
        >>> config.configure()
        >>> logger = get_logger('my_module')

    """

    def __init__(self) -> None:
        self.configured = False
        self.level = logging.INFO

    def configure(self, level: str | None = None) -> None:
        """初始化 structlog 处理器(幂等).

        Args:
            level: 可选的日志级别名称,例如 "DEBUG".首次配置后仍可通过该参数调整级别.

        """
        if level is not None:
            self.level = logging.getLevelName(level.upper())
            logging.getLogger(PACKAGE_NAME).setLevel(self.level)

        if self.configured:
            return

        processors = [
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            self._add_global_context,
            self._get_renderer(),
        ]
        structlog.configure(
            processors=cast("list[Processor]", processors),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        self.configured = True

    @staticmethod
    def _add_global_context(
        _logger: Any,
        _method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        """附加包名等全局上下文."""
        event_dict.setdefault("package", PACKAGE_NAME)
        return event_dict

    @staticmethod
    def _get_renderer() -> Processor:
        """根据终端能力返回渲染器.

        Returns:
            终端下使用控制台渲染器,否则输出 JSON.

        """
        if sys.stderr.isatty():
            return structlog.dev.ConsoleRenderer(colors=True)
        return structlog.processors.JSONRenderer()


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """获取结构化日志记录器.

    Args:
        name: 日志记录器名称,通常使用模块名.

    Returns:
        绑定的 structlog 日志记录器实例.

    Example:
        >>> logger = get_logger('htmlform.form_model')
        >>> logger.info('表单初始化完成', form='UserForm')

    """
    structlog_config.configure()
    return structlog.get_logger(name)


def log_with_context(
    level: LogLevel,
    event: str,
    *,
    module: str,
    action: str,
    context: ContextDict | None = None,
    extra: LoggerExtra | None = None,
) -> None:
    """记录带有统一上下文字段的结构化日志.

    Args:
        level: 日志级别,使用 structlog 的方法名,例如 "info"、"error".
        event: 日志事件描述.
        module: 所属模块,用于快速过滤.
        action: 当前操作名称.
        context: 业务上下文字段.
        extra: 额外字段,与 context 合并.

    """
    logger = get_logger(f"{PACKAGE_NAME}.{module}")
    payload: ContextDict = {"module": module, "action": action}
    if context:
        payload.update(context)
    if extra:
        payload.update(extra)

    log_method = getattr(logger, level, logger.error)
    log_method(event, **payload)
