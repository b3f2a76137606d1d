"""邮件处理器模块"""

from application.handlers.mail.read_mailbox_handler import ReadMailboxHandler

__all__ = ["ReadMailboxHandler"]
