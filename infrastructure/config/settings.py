"""
应用配置管理

使用 pydantic-settings 管理环境变量和配置
"""

from typing import Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.mailbox.value_objects.mailbox_config import MailboxConfig


class Settings(BaseSettings):
    """
    应用配置类

    自动从环境变量和 .env 文件读取配置
    """

    # ========== IMAP 配置 ==========
    imap_host: str = ""
    imap_port: int = 993
    imap_username: str = ""
    imap_password: SecretStr = SecretStr("")
    imap_folder: str = "INBOX"
    imap_timeout: Optional[float] = None  # None 表示使用 imaplib 默认行为

    # ========== 日志配置 ==========
    log_level: str = "INFO"
    log_backend: Literal["simple", "loguru"] = "simple"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # 忽略未定义的环境变量
    )

    def mailbox_config(self) -> MailboxConfig:
        """根据 IMAP 配置构造 MailboxConfig"""
        return MailboxConfig(
            host=self.imap_host,
            port=self.imap_port,
            username=self.imap_username,
            password=self.imap_password.get_secret_value(),
            selection=self.imap_folder,
        )


# 全局配置实例（单例）
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    获取配置实例（单例模式）

    Returns:
        Settings 实例
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
