"""邮件解析服务接口"""

from abc import ABC, abstractmethod

from domain.mail.value_objects.message import Message


class MessageParser(ABC):
    """
    邮件解析服务接口

    将原始邮件字节解析为 Message，提取发件人地址、主题和纯文本正文。
    任一字段提取失败即抛出异常，不会返回部分结果。
    """

    @abstractmethod
    def parse(self, raw: bytes) -> Message:
        """
        解析单封原始邮件

        Args:
            raw: RFC 822 原始字节

        Returns:
            解析后的 Message

        Raises:
            MalformedMessageError: MIME 结构无法解码
            MissingHeaderError: 缺少 From 或 Subject 头
            AddressParseError: From 头无法解析为地址
            UnsupportedAddressFormError: 第一个地址是组地址
            NoPlainTextPartError: 多部分邮件中没有 text/plain 部分
        """
        raise NotImplementedError


class MessageParseError(Exception):
    """邮件解析错误基类"""


class MalformedMessageError(MessageParseError):
    """MIME 结构无法解码"""


class MissingHeaderError(MessageParseError):
    """缺少必需的邮件头"""

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"Missing {header} header")


class AddressParseError(MessageParseError):
    """发件人地址无法解析或为空"""

    def __init__(self, value: str, message: str = "no address found"):
        self.value = value
        super().__init__(f"Cannot parse address {value!r} - {message}")


class UnsupportedAddressFormError(MessageParseError):
    """第一个地址不是单一邮箱（例如组地址）"""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Expected a single mailbox, got a group: {value!r}")


class NoPlainTextPartError(MessageParseError):
    """多部分邮件中没有 text/plain 部分"""

    def __init__(self, content_types=None):
        self.content_types = list(content_types or [])
        super().__init__(
            f"No text/plain part found among {self.content_types}"
        )
