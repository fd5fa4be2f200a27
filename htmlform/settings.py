"""htmlform - 统一配置读取与校验.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 环境变量统一使用 ``HTMLFORM_`` 前缀,例如 ``HTMLFORM_THEME=bootstrap4``.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parent
TEMPLATES_ROOT = PACKAGE_ROOT / "templates"
THEMES_ROOT = TEMPLATES_ROOT / "themes"
DOTENV_PATH = Path.cwd() / ".env"

DEFAULT_THEME = "bootstrap4"
DEFAULT_TEMPLATE = "@form"
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_csv(raw: str) -> tuple[str, ...]:
    parts = [item.strip() for item in raw.split(",")]
    return tuple(item for item in parts if item)


def bundled_themes() -> tuple[str, ...]:
    """列出随包发布的主题名称."""
    if not THEMES_ROOT.is_dir():
        return ()
    return tuple(sorted(path.name for path in THEMES_ROOT.iterdir() if path.is_dir()))


class Settings(BaseSettings):
    """表单渲染与校验的运行时设置."""

    model_config = SettingsConfigDict(
        env_prefix="HTMLFORM_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
        # template_dirs 约定使用逗号分隔,同时兼容 JSON 数组,交由 validator 解析.
        enable_decoding=False,
    )

    theme: str = Field(default=DEFAULT_THEME)
    default_template: str = Field(default=DEFAULT_TEMPLATE)
    template_dirs: tuple[str, ...] = Field(default_factory=tuple)
    novalidate: bool = Field(default=False)
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @field_validator("template_dirs", mode="before")
    @classmethod
    def _parse_template_dirs(cls, value: object) -> object:
        if isinstance(value, str):
            raw = value.strip()
            if raw.startswith("["):
                try:
                    return tuple(str(item) for item in json.loads(raw))
                except json.JSONDecodeError as exc:
                    msg = "HTMLFORM_TEMPLATE_DIRS 不是合法的 JSON 数组"
                    raise ValueError(msg) from exc
            return _parse_csv(raw)
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in _LOG_LEVELS:
            msg = f"HTMLFORM_LOG_LEVEL 取值非法: {value}"
            raise ValueError(msg)
        return normalized

    @field_validator("default_template")
    @classmethod
    def _ensure_default_template(cls, value: str) -> str:
        if not value:
            msg = "HTMLFORM_DEFAULT_TEMPLATE 不能为空"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _validate_theme(self) -> Settings:
        # 自定义模板目录可能提供额外主题,此时无法在启动时校验.
        if self.template_dirs:
            return self
        available = bundled_themes()
        if available and self.theme not in available:
            msg = f"HTMLFORM_THEME 不存在: {self.theme}, 可选: {', '.join(available)}"
            raise ValueError(msg)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """返回进程级缓存的 Settings."""
    settings = Settings.load()
    logger.debug("htmlform settings loaded: theme=%s", settings.theme)
    return settings
