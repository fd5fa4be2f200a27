"""htmlform 工具函数包."""
