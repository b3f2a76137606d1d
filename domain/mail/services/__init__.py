"""邮件领域服务接口"""

from domain.mail.services.mail_fetch_service import (
    MailFetchService,
    MailFetchError,
    TransportError,
    ProtocolError,
    SessionStateError,
    AuthError,
    FolderError,
)
from domain.mail.services.message_parser import (
    MessageParser,
    MessageParseError,
    MalformedMessageError,
    MissingHeaderError,
    AddressParseError,
    UnsupportedAddressFormError,
    NoPlainTextPartError,
)

__all__ = [
    "MailFetchService",
    "MailFetchError",
    "TransportError",
    "ProtocolError",
    "SessionStateError",
    "AuthError",
    "FolderError",
    "MessageParser",
    "MessageParseError",
    "MalformedMessageError",
    "MissingHeaderError",
    "AddressParseError",
    "UnsupportedAddressFormError",
    "NoPlainTextPartError",
]
