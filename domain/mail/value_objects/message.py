"""邮件消息值对象"""

from dataclasses import dataclass

from domain.common.base_value_object import BaseValueObject


@dataclass(frozen=True)
class Message(BaseValueObject):
    """
    邮件消息值对象

    只由 MessageParser 在三个字段都成功提取之后创建。

    Attributes:
        sender: 发件人邮箱地址（不含显示名）
        subject: 邮件主题
        body: 纯文本正文（已去除末尾空白）
    """

    sender: str
    subject: str
    body: str
