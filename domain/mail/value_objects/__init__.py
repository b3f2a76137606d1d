"""邮件值对象模块"""

from domain.mail.value_objects.message import Message
from domain.mail.value_objects.raw_message import RawMessage
from domain.mail.value_objects.session_state import SessionState

__all__ = ["Message", "RawMessage", "SessionState"]
