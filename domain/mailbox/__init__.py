"""
邮箱配置界限上下文

提供连接邮箱所需的值对象：
- MailboxConfig
"""

from domain.mailbox.value_objects.mailbox_config import MailboxConfig

__all__ = ["MailboxConfig"]
