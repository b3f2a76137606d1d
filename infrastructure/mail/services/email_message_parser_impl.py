"""基于标准库 email 的邮件解析实现"""

import email
from email import policy
from email.errors import (
    InvalidHeaderDefect,
    MessageError,
    MultipartInvariantViolationDefect,
    NoBoundaryInMultipartDefect,
    StartBoundaryNotFoundDefect,
)
from email.message import EmailMessage
from typing import Any, Optional

from common.logging import get_logger
from domain.mail.services.message_parser import (
    AddressParseError,
    MalformedMessageError,
    MessageParser,
    MissingHeaderError,
    NoPlainTextPartError,
    UnsupportedAddressFormError,
)
from domain.mail.value_objects.message import Message

# 出现这些缺陷时多部分结构无法还原
STRUCTURAL_DEFECTS = (
    NoBoundaryInMultipartDefect,
    StartBoundaryNotFoundDefect,
    MultipartInvariantViolationDefect,
)


class EmailMessageParserImpl(MessageParser):
    """
    邮件解析实现

    使用 email.message_from_bytes + email.policy.default 解码 MIME 结构：
    - From: 取地址列表中的第一个单一邮箱，只返回地址部分
    - Subject: 取头部值（RFC 2047 编码词由 email 包解码）
    - 正文: 非多部分邮件取自身内容；多部分邮件取第一个 text/plain 子部分，
      不递归进入嵌套的多部分结构
    """

    def __init__(self, logger: Optional[Any] = None):
        self._logger = logger or get_logger(__name__)

    def parse(self, raw: bytes) -> Message:
        msg = self._decode(raw)

        return Message(
            sender=self._extract_sender(msg),
            subject=self._extract_subject(msg),
            body=self._extract_body(msg),
        )

    def _decode(self, raw: bytes) -> EmailMessage:
        """
        解码 MIME 结构

        Raises:
            MalformedMessageError: 输入不是字节或结构无法解码
        """
        if not isinstance(raw, (bytes, bytearray)):
            raise MalformedMessageError(
                f"Expected raw message bytes, got {type(raw).__name__}"
            )

        try:
            msg = email.message_from_bytes(bytes(raw), policy=policy.default)
        except (MessageError, ValueError, TypeError) as e:
            raise MalformedMessageError(f"Cannot decode message - {e}") from e

        for defect in msg.defects:
            if isinstance(defect, STRUCTURAL_DEFECTS):
                raise MalformedMessageError(
                    f"Cannot decode multipart structure - {type(defect).__name__}"
                )

        return msg

    def _extract_sender(self, msg: EmailMessage) -> str:
        """
        提取发件人地址（不含显示名）

        Raises:
            MissingHeaderError: 缺少 From 头
            AddressParseError: 无法解析、地址列表为空或地址不完整
            UnsupportedAddressFormError: 第一个地址是组地址
        """
        value = _raw_header(msg, "From")
        if value is None:
            raise MissingHeaderError("From")

        try:
            header = msg.get("From")
            groups = list(header.groups)
            defects = list(header.defects)
            first = groups[0] if groups else None
            is_group = first is not None and first.display_name is not None
            addr_spec = first.addresses[0].addr_spec if first and first.addresses else ""
        except Exception as e:
            raise AddressParseError(value=value, message=f"cannot parse - {e}") from e

        if not groups:
            raise AddressParseError(value=value)

        if is_group:
            raise UnsupportedAddressFormError(value=value)

        for defect in defects:
            if isinstance(defect, InvalidHeaderDefect):
                raise AddressParseError(value=value, message=str(defect))

        if not addr_spec:
            raise AddressParseError(value=value)

        if not _is_complete_address(addr_spec):
            raise AddressParseError(value=value, message="not an email address")

        return addr_spec

    def _extract_subject(self, msg: EmailMessage) -> str:
        """
        提取主题

        Raises:
            MissingHeaderError: 缺少 Subject 头
        """
        subject = msg.get("Subject")
        if subject is None:
            raise MissingHeaderError("Subject")
        return str(subject)

    def _extract_body(self, msg: EmailMessage) -> str:
        """
        提取纯文本正文并去除末尾空白

        只扫描直接子部分，第一个 text/plain 部分胜出。

        Raises:
            NoPlainTextPartError: 多部分邮件中没有 text/plain 部分
        """
        parts = list(msg.iter_parts()) if msg.is_multipart() else []

        if not parts:
            text_part = msg
        else:
            text_part = next(
                (part for part in parts if part.get_content_type() == "text/plain"),
                None,
            )
            if text_part is None:
                raise NoPlainTextPartError(
                    [part.get_content_type() for part in parts]
                )

        if text_part.is_multipart():
            # multipart 声明了子部分却一个也没有
            raise NoPlainTextPartError([])

        return self._decode_payload(text_part).rstrip()

    def _decode_payload(self, part: EmailMessage) -> str:
        """按声明的字符集解码正文，未知字符集回退到 UTF-8"""
        payload = part.get_payload(decode=True)
        if payload is None:
            return ""

        charset = part.get_content_charset() or "utf-8"

        try:
            return payload.decode(charset, errors="replace")
        except (LookupError, UnicodeDecodeError):
            self._logger.debug(f"Unknown charset {charset!r}, falling back to utf-8")
            return payload.decode("utf-8", errors="replace")


def _raw_header(msg: EmailMessage, name: str) -> Optional[str]:
    """读取未经头部解析的原始值"""
    for key, value in msg.raw_items():
        if key.lower() == name.lower():
            return str(value).strip()
    return None


def _is_complete_address(addr_spec: str) -> bool:
    local_part, _, domain = addr_spec.rpartition("@")
    if not local_part or not domain:
        return False
    if any(ch in domain for ch in '<>" \t'):
        return False
    # 域名字面量必须闭合，如 [192.0.2.1]
    return not domain.startswith("[") or domain.endswith("]")
