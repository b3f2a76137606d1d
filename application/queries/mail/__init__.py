"""Mail queries package"""

from application.queries.mail.read_mailbox import ReadMailboxQuery

__all__ = ["ReadMailboxQuery"]
