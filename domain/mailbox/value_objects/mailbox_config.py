"""邮箱连接配置值对象"""

from dataclasses import dataclass, field

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException

IMAPS_PORT = 993
DEFAULT_SELECTION = "INBOX"


@dataclass(frozen=True)
class MailboxConfig(BaseValueObject):
    """
    邮箱连接配置值对象

    由调用方在每次读取时构造，不做持久化，也不提供默认凭证。

    Attributes:
        host: IMAP 服务器地址
        port: IMAP 服务器端口，默认 993 (SSL/TLS)
        username: 登录用户名
        password: 登录密码（明文，不出现在 repr 中）
        selection: 要选择的文件夹，默认 INBOX
    """

    host: str = ""
    port: int = IMAPS_PORT
    username: str = ""
    password: str = field(default="", repr=False)
    selection: str = DEFAULT_SELECTION

    def validate(self) -> None:
        """验证连接配置的有效性"""
        if not 1 <= self.port <= 65535:
            raise InvalidValueObjectException(
                value_object_type="MailboxConfig",
                value=self.port,
                reason=f"Invalid port number: {self.port}. Must be between 1 and 65535"
            )

        if not self.selection or not self.selection.strip():
            raise InvalidValueObjectException(
                value_object_type="MailboxConfig",
                value=self.selection,
                reason="Folder selection cannot be empty"
            )

    @property
    def connection_string(self) -> str:
        """返回连接字符串格式"""
        return f"imaps://{self.host}:{self.port}"
