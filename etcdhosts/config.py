"""
配置管理模块，支持环境变量
"""

import os
from dataclasses import dataclass

from etcdhosts.hostlist import OutputFormat


@dataclass
class Config:
    """应用配置类，从环境变量加载配置"""

    hosts_file_path: str = "/etc/hosts"
    hosts_key: str = "/etcdhosts"
    output_format: str = "unix"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        从环境变量加载配置

        环境变量说明:
            HOSTS_FILE: 本地 hosts 文件路径 (默认: /etc/hosts)
            HOSTS_KEY: 存储中的 hosts 键 (默认: /etcdhosts)
            OUTPUT_FORMAT: 输出格式 unix 或 windows (默认: unix)
            LOG_LEVEL: 日志级别 (默认: INFO)
        """
        return cls(
            hosts_file_path=os.getenv("HOSTS_FILE", "/etc/hosts"),
            hosts_key=os.getenv("HOSTS_KEY", "/etcdhosts"),
            output_format=os.getenv("OUTPUT_FORMAT", "unix").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )

    @property
    def format(self) -> OutputFormat:
        return OutputFormat.from_name(self.output_format)

    def validate(self) -> None:
        """验证配置是否有效"""
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_log_levels:
            raise ValueError(
                f"无效的 LOG_LEVEL: {self.log_level}. "
                f"必须是以下之一: {', '.join(sorted(valid_log_levels))}"
            )

        valid_formats = {f.value for f in OutputFormat}
        if self.output_format not in valid_formats:
            raise ValueError(
                f"无效的 OUTPUT_FORMAT: {self.output_format}. "
                f"必须是以下之一: {', '.join(sorted(valid_formats))}"
            )

        if not self.hosts_key:
            raise ValueError("HOSTS_KEY 不能为空")
