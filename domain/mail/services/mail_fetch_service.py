"""邮件收取服务接口"""

from abc import ABC, abstractmethod
from typing import List

from domain.mailbox.value_objects.mailbox_config import MailboxConfig
from domain.mail.value_objects.raw_message import RawMessage


class MailFetchService(ABC):
    """
    邮件收取服务接口

    定义从远程邮箱只读收取原始邮件的契约。
    具体实现在基础设施层，负责：
    - TLS 连接与登录
    - 选择文件夹并枚举全部邮件
    - 以不改变已读状态的方式收取原始字节
    - 在所有退出路径上登出
    """

    @abstractmethod
    def fetch_all(self, config: MailboxConfig) -> List[RawMessage]:
        """
        收取所选文件夹中的全部邮件

        邮件按服务器返回的顺序排列，收取过程不会修改邮件的已读/未读标记。

        Args:
            config: 邮箱连接配置

        Returns:
            原始邮件列表，文件夹为空时返回空列表

        Raises:
            TransportError: TLS 协商失败或主机不可达
            ProtocolError: 会话级错误
            AuthError: 用户名或密码错误
            FolderError: 文件夹不存在或无法访问
        """
        raise NotImplementedError


class MailFetchError(Exception):
    """邮件收取错误基类"""


class TransportError(MailFetchError):
    """TLS/网络层错误"""

    def __init__(self, server: str, port: int, message: str):
        self.server = server
        self.port = port
        super().__init__(f"Failed to connect to {server}:{port} - {message}")


class ProtocolError(MailFetchError):
    """IMAP 会话级错误"""


class SessionStateError(ProtocolError):
    """在错误的会话状态下执行了操作"""

    def __init__(self, operation: str, expected: str, actual: str):
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Cannot {operation} in state '{actual}' (requires '{expected}')"
        )


class AuthError(MailFetchError):
    """认证错误"""

    def __init__(self, username: str, message: str):
        self.username = username
        super().__init__(f"Authentication failed for {username} - {message}")


class FolderError(MailFetchError):
    """文件夹不存在或不可访问"""

    def __init__(self, folder: str, message: str):
        self.folder = folder
        super().__init__(f"Cannot select folder {folder!r} - {message}")
