"""原始邮件值对象"""

from dataclasses import dataclass, field

from domain.common.base_value_object import BaseValueObject


@dataclass(frozen=True)
class RawMessage(BaseValueObject):
    """
    从 IMAP 服务器取回的原始邮件

    Attributes:
        uid: 邮件 UID，仅在本次会话所选文件夹内有效
        data: 完整的 RFC 822 原始字节
    """

    uid: int
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        """原始字节数"""
        return len(self.data)
