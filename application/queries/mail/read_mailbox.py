"""读取邮箱查询"""

from dataclasses import dataclass

from domain.mailbox.value_objects.mailbox_config import MailboxConfig


@dataclass
class ReadMailboxQuery:
    """
    读取邮箱查询

    Attributes:
        config: 邮箱连接配置（主机、端口、凭证、文件夹）
    """

    config: MailboxConfig
