"""ImapMailFetchServiceImpl 单元测试"""

import imaplib
from typing import Dict

import pytest
from unittest.mock import Mock, MagicMock, patch

from domain.mailbox.value_objects.mailbox_config import MailboxConfig
from domain.mail.services.mail_fetch_service import (
    AuthError,
    FolderError,
    ProtocolError,
    TransportError,
)
from domain.mail.value_objects.raw_message import RawMessage
from infrastructure.mail.services.imap_mail_fetch_service_impl import (
    ImapMailFetchServiceImpl,
)


IMAP4_SSL_PATH = "infrastructure.mail.services.imap_session.imaplib.IMAP4_SSL"


def create_test_config(
    host: str = "imap.example.com",
    username: str = "test@example.com",
    password: str = "test_password",
    selection: str = "INBOX",
) -> MailboxConfig:
    """创建测试用的邮箱配置"""
    return MailboxConfig(
        host=host,
        username=username,
        password=password,
        selection=selection,
    )


def create_mock_email_data(
    from_address: str = "sender@example.com",
    subject: str = "Test Subject",
    body_text: str = "Test body content",
) -> bytes:
    """创建模拟的原始邮件数据"""
    email_content = f"""From: {from_address}
To: recipient@example.com
Subject: {subject}
Content-Type: text/plain; charset="utf-8"

{body_text}
"""
    return email_content.encode("utf-8")


def create_mock_imap(messages: Dict[int, bytes]) -> MagicMock:
    """创建按 UID 返回邮件的 Mock IMAP 连接"""
    mock_imap = MagicMock()
    mock_imap.login.return_value = ("OK", [b"Logged in"])
    mock_imap.select.return_value = ("OK", [str(len(messages)).encode()])
    mock_imap.logout.return_value = ("BYE", [b"Logging out"])

    def uid(command, *args):
        if command == "SEARCH":
            return "OK", [b" ".join(str(u).encode() for u in messages)]
        if command == "FETCH":
            message_uid = int(args[0])
            data = messages[message_uid]
            header = f"1 (UID {message_uid} BODY[] {{{len(data)}}}".encode()
            return "OK", [(header, data), b")"]
        return "BAD", [b"unexpected command"]

    mock_imap.uid.side_effect = uid
    return mock_imap


class TestImapMailFetchServiceImplInit:
    """初始化测试"""

    def test_init_defaults(self):
        """测试默认初始化"""
        service = ImapMailFetchServiceImpl()
        assert service._timeout is None

    def test_init_with_custom_logger(self):
        """测试使用自定义 logger 初始化"""
        mock_logger = Mock()
        service = ImapMailFetchServiceImpl(logger=mock_logger)
        assert service._logger == mock_logger


class TestImapMailFetchServiceImplFetchAll:
    """收取邮件测试"""

    @patch(IMAP4_SSL_PATH)
    def test_fetch_all_success(self, mock_imap_class):
        """测试成功收取全部邮件"""
        messages = {
            1: create_mock_email_data(subject="First"),
            2: create_mock_email_data(subject="Second"),
        }
        mock_imap = create_mock_imap(messages)
        mock_imap_class.return_value = mock_imap

        service = ImapMailFetchServiceImpl()
        result = service.fetch_all(create_test_config())

        assert result == [
            RawMessage(uid=1, data=messages[1]),
            RawMessage(uid=2, data=messages[2]),
        ]
        assert mock_imap_class.call_args.kwargs["host"] == "imap.example.com"
        assert mock_imap_class.call_args.kwargs["port"] == 993
        mock_imap.login.assert_called_once_with("test@example.com", "test_password")
        mock_imap.select.assert_called_once_with('"INBOX"', readonly=True)
        mock_imap.logout.assert_called_once()

    @patch(IMAP4_SSL_PATH)
    def test_fetch_all_preserves_server_order(self, mock_imap_class):
        """测试按服务器返回的 UID 顺序收取"""
        messages = {
            30: create_mock_email_data(subject="c"),
            10: create_mock_email_data(subject="a"),
            20: create_mock_email_data(subject="b"),
        }
        mock_imap_class.return_value = create_mock_imap(messages)

        result = ImapMailFetchServiceImpl().fetch_all(create_test_config())

        assert [raw.uid for raw in result] == [30, 10, 20]

    @patch(IMAP4_SSL_PATH)
    def test_fetch_all_never_marks_messages_read(self, mock_imap_class):
        """测试只使用 BODY.PEEK[] 收取，从不修改标记"""
        messages = {1: create_mock_email_data(), 2: create_mock_email_data()}
        mock_imap = create_mock_imap(messages)
        mock_imap_class.return_value = mock_imap

        ImapMailFetchServiceImpl().fetch_all(create_test_config())

        fetch_calls = [c for c in mock_imap.uid.call_args_list if c.args[0] == "FETCH"]
        assert len(fetch_calls) == 2
        for fetch_call in fetch_calls:
            assert fetch_call.args[2] == "(BODY.PEEK[])"
        mock_imap.fetch.assert_not_called()
        mock_imap.store.assert_not_called()

    @patch(IMAP4_SSL_PATH)
    def test_fetch_all_empty_folder(self, mock_imap_class):
        """测试空文件夹返回空列表而不是错误"""
        mock_imap = create_mock_imap({})
        mock_imap_class.return_value = mock_imap

        result = ImapMailFetchServiceImpl().fetch_all(create_test_config())

        assert result == []
        mock_imap.logout.assert_called_once()

    @patch(IMAP4_SSL_PATH)
    def test_fetch_all_custom_folder(self, mock_imap_class):
        """测试选择自定义文件夹"""
        mock_imap = create_mock_imap({})
        mock_imap_class.return_value = mock_imap

        ImapMailFetchServiceImpl().fetch_all(create_test_config(selection="Sent Items"))

        mock_imap.select.assert_called_once_with('"Sent Items"', readonly=True)

    @patch(IMAP4_SSL_PATH)
    def test_fetch_all_logs_endpoint_and_sizes(self, mock_imap_class):
        """测试日志包含服务器地址和每封邮件大小，不包含密码"""
        data = create_mock_email_data()
        mock_imap_class.return_value = create_mock_imap({7: data})
        mock_logger = Mock()

        service = ImapMailFetchServiceImpl(logger=mock_logger)
        service.fetch_all(create_test_config())

        debug_lines = [call.args[0] for call in mock_logger.debug.call_args_list]
        assert "Reading INBOX from imaps://imap.example.com:993" in debug_lines
        assert f"Fetched uid=7 ({len(data)} bytes)" in debug_lines
        all_lines = debug_lines + [call.args[0] for call in mock_logger.info.call_args_list]
        assert not any("test_password" in line for line in all_lines)


class TestImapMailFetchServiceImplErrors:
    """错误传播测试"""

    @patch(IMAP4_SSL_PATH)
    def test_connection_failure_raises_transport_error(self, mock_imap_class):
        """测试连接失败抛出 TransportError"""
        mock_imap_class.side_effect = ConnectionRefusedError("Connection refused")

        with pytest.raises(TransportError) as exc_info:
            ImapMailFetchServiceImpl().fetch_all(create_test_config())

        assert "imap.example.com:993" in str(exc_info.value)

    @patch(IMAP4_SSL_PATH)
    def test_auth_failure_raises_auth_error_and_logs_out(self, mock_imap_class):
        """测试认证失败抛出 AuthError，会话仍被关闭"""
        mock_imap = create_mock_imap({})
        mock_imap.login.side_effect = imaplib.IMAP4.error("Invalid credentials")
        mock_imap_class.return_value = mock_imap

        with pytest.raises(AuthError) as exc_info:
            ImapMailFetchServiceImpl().fetch_all(create_test_config())

        assert "test@example.com" in str(exc_info.value)
        assert "test_password" not in str(exc_info.value)
        mock_imap.logout.assert_called_once()

    @patch(IMAP4_SSL_PATH)
    def test_missing_folder_raises_folder_error(self, mock_imap_class):
        """测试文件夹不存在抛出 FolderError"""
        mock_imap = create_mock_imap({})
        mock_imap.select.return_value = ("NO", [b"Mailbox doesn't exist"])
        mock_imap_class.return_value = mock_imap

        with pytest.raises(FolderError) as exc_info:
            ImapMailFetchServiceImpl().fetch_all(create_test_config(selection="Missing"))

        assert exc_info.value.folder == "Missing"
        mock_imap.logout.assert_called_once()

    @patch(IMAP4_SSL_PATH)
    def test_fetch_failure_stops_batch_and_logs_out(self, mock_imap_class):
        """测试中途收取失败：整批失败，会话仍被关闭"""
        mock_imap = create_mock_imap({})

        def uid(command, *args):
            if command == "SEARCH":
                return "OK", [b"1 2 3"]
            if args[0] == "2":
                return "NO", [b"message vanished"]
            return "OK", [(b"1 (UID 1 BODY[] {1}", b"x"), b")"]

        mock_imap.uid.side_effect = uid
        mock_imap_class.return_value = mock_imap

        with pytest.raises(ProtocolError) as exc_info:
            ImapMailFetchServiceImpl().fetch_all(create_test_config())

        assert "message vanished" in str(exc_info.value)
        fetched = [c.args[1] for c in mock_imap.uid.call_args_list if c.args[0] == "FETCH"]
        assert fetched == ["1", "2"]
        mock_imap.logout.assert_called_once()

    @patch(IMAP4_SSL_PATH)
    def test_logout_failure_after_success_raises(self, mock_imap_class):
        """测试成功路径上登出失败会抛出 ProtocolError"""
        mock_imap = create_mock_imap({1: create_mock_email_data()})
        mock_imap.logout.side_effect = imaplib.IMAP4.abort("socket error")
        mock_imap_class.return_value = mock_imap

        with pytest.raises(ProtocolError):
            ImapMailFetchServiceImpl().fetch_all(create_test_config())
