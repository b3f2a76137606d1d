"""邮箱值对象模块"""

from domain.mailbox.value_objects.mailbox_config import MailboxConfig

__all__ = ["MailboxConfig"]
