"""IMAP 会话状态机"""

import imaplib
import ssl
from typing import Any, List, Optional

from imapclient import imap_utf7

from common.logging import get_logger
from domain.mail.services.mail_fetch_service import (
    AuthError,
    FolderError,
    MailFetchError,
    ProtocolError,
    SessionStateError,
    TransportError,
)
from domain.mail.value_objects.session_state import SessionState

# 只读收取：BODY.PEEK[] 不会隐式设置 \Seen 标记
PEEK_FETCH_ITEM = "(BODY.PEEK[])"


def quote_mailbox_name(name: str) -> str:
    """将文件夹名编码为 modified UTF-7（RFC 3501 5.1.3）并加引号"""
    encoded = imap_utf7.encode(name).decode("ascii")
    escaped = encoded.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _is_ascii(value: str) -> bool:
    return all(ord(ch) < 128 for ch in value)


class ImapSession:
    """
    IMAP 会话

    独占持有一个 imaplib.IMAP4_SSL 连接，按以下顺序推进状态：

        CONNECTED --login--> AUTHENTICATED --select--> FOLDER_SELECTED
        (任意状态) --logout--> CLOSED

    状态不匹配的操作抛出 SessionStateError。作为上下文管理器使用时，
    退出时一定会登出：正常退出时登出失败会抛出 ProtocolError，
    异常退出时登出失败只记录日志，原异常继续传播。

    用法:
        with ImapSession.open("imap.example.com", 993) as session:
            session.login(username, password)
            session.select("INBOX")
            for uid in session.search_all():
                raw = session.fetch_peek(uid)
    """

    def __init__(
        self,
        imap: imaplib.IMAP4,
        server: str = "",
        port: int = 0,
        logger: Optional[Any] = None,
    ):
        """
        包装一个已建立的 IMAP 连接

        Args:
            imap: 已收到服务器问候的 IMAP 连接
            server: 服务器地址（用于日志和错误信息）
            port: 服务器端口（用于错误信息）
            logger: 可选的日志记录器
        """
        self._imap = imap
        self._server = server
        self._port = port
        self._logger = logger or get_logger(__name__)
        self._state = SessionState.CONNECTED
        self._folder: Optional[str] = None

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
        logger: Optional[Any] = None,
    ) -> "ImapSession":
        """
        建立 TLS 连接并读取服务器问候

        Args:
            host: IMAP 服务器地址
            port: IMAP 服务器端口
            timeout: 套接字超时（秒），None 表示使用默认行为
            ssl_context: 可选的 SSL 上下文，默认 ssl.create_default_context()
            logger: 可选的日志记录器

        Returns:
            处于 CONNECTED 状态的会话

        Raises:
            TransportError: TLS 协商失败或主机不可达
            ProtocolError: 服务器问候异常
        """
        log = logger or get_logger(__name__)
        context = ssl_context or ssl.create_default_context()

        log.debug(f"Connecting to {host}:{port}")
        try:
            imap = imaplib.IMAP4_SSL(
                host=host,
                port=port,
                ssl_context=context,
                timeout=timeout,
            )
        except imaplib.IMAP4.error as e:
            raise ProtocolError(f"Handshake with {host}:{port} failed - {e}") from e
        except OSError as e:
            # ssl.SSLError 和 socket 错误都是 OSError
            raise TransportError(server=host, port=port, message=str(e)) from e

        return cls(imap, server=host, port=port, logger=log)

    @property
    def state(self) -> SessionState:
        """当前会话状态"""
        return self._state

    @property
    def folder(self) -> Optional[str]:
        """已选择的文件夹"""
        return self._folder

    def login(self, username: str, password: str) -> None:
        """
        登录

        凭证全为 ASCII 时使用 LOGIN；否则使用 AUTHENTICATE PLAIN 以 UTF-8 发送，
        要求服务器声明 AUTH=PLAIN。

        Raises:
            AuthError: 服务器拒绝凭证，或凭证无法发送
            ProtocolError: 登录过程中连接中断
            TransportError: 网络错误
        """
        self._require(SessionState.CONNECTED, "login")

        self._logger.debug(f"Authenticating as {username}")
        try:
            if _is_ascii(username) and _is_ascii(password):
                self._imap.login(username, password)
            else:
                self._authenticate_plain(username, password)
        except imaplib.IMAP4.abort as e:
            raise ProtocolError(f"Connection aborted during login - {e}") from e
        except imaplib.IMAP4.error as e:
            raise AuthError(username=username, message=str(e)) from e
        except UnicodeError as e:
            raise AuthError(username=username, message=f"credentials cannot be encoded - {e}") from e
        except OSError as e:
            raise TransportError(server=self._server, port=self._port, message=str(e)) from e

        self._state = SessionState.AUTHENTICATED

    def _authenticate_plain(self, username: str, password: str) -> None:
        if "AUTH=PLAIN" not in self._imap.capabilities:
            raise AuthError(
                username=username,
                message="non-ASCII credentials require AUTH=PLAIN, which the server does not offer",
            )

        response = f"\0{username}\0{password}".encode("utf-8")
        self._imap.authenticate("PLAIN", lambda challenge: response)

    def select(self, folder: str) -> int:
        """
        以只读方式（EXAMINE）选择文件夹

        Args:
            folder: 文件夹名

        Returns:
            服务器报告的邮件数量

        Raises:
            FolderError: 文件夹不存在或不可访问
        """
        self._require(SessionState.AUTHENTICATED, "select")

        try:
            status, data = self._imap.select(quote_mailbox_name(folder), readonly=True)
        except imaplib.IMAP4.abort as e:
            raise ProtocolError(f"Connection aborted during select - {e}") from e
        except imaplib.IMAP4.error as e:
            raise FolderError(folder=folder, message=str(e)) from e
        except UnicodeError as e:
            raise FolderError(folder=folder, message=f"folder name cannot be encoded - {e}") from e

        if status != "OK":
            raise FolderError(folder=folder, message=_describe(data))

        self._state = SessionState.FOLDER_SELECTED
        self._folder = folder

        try:
            return int(data[0])
        except (IndexError, TypeError, ValueError):
            return 0

    def search_all(self) -> List[int]:
        """
        UID SEARCH ALL

        Returns:
            服务器返回顺序的 UID 列表，空文件夹返回空列表
        """
        self._require(SessionState.FOLDER_SELECTED, "search")

        status, data = self._uid("SEARCH", "ALL")
        if status != "OK":
            raise ProtocolError(f"UID SEARCH failed: {_describe(data)}")

        if not data or not data[0]:
            return []
        return [int(uid) for uid in data[0].split()]

    def fetch_peek(self, uid: int) -> bytes:
        """
        以 BODY.PEEK[] 收取整封邮件，不改变已读状态

        Args:
            uid: 邮件 UID

        Returns:
            原始邮件字节
        """
        self._require(SessionState.FOLDER_SELECTED, "fetch")

        status, data = self._uid("FETCH", str(uid), PEEK_FETCH_ITEM)
        if status != "OK":
            raise ProtocolError(f"UID FETCH {uid} failed: {_describe(data)}")

        # 响应形如 [(b'1 (UID 7 BODY[] {342}', b'<raw>'), b')']
        for item in data or []:
            if isinstance(item, tuple) and len(item) >= 2 and isinstance(item[1], bytes):
                return item[1]

        raise ProtocolError(f"UID FETCH {uid} returned no message body")

    def logout(self) -> None:
        """
        关闭文件夹并登出，之后会话进入 CLOSED 状态

        重复调用不做任何事。

        Raises:
            ProtocolError: LOGOUT 失败
        """
        if self._state is SessionState.CLOSED:
            return

        try:
            # close() 只能在 SELECTED 状态下调用
            if self._state is SessionState.FOLDER_SELECTED:
                try:
                    self._imap.close()
                except (imaplib.IMAP4.error, OSError) as e:
                    self._logger.debug(f"Error during close: {e}")

            self._imap.logout()
        except (imaplib.IMAP4.error, OSError) as e:
            raise ProtocolError(f"Logout failed - {e}") from e
        finally:
            self._state = SessionState.CLOSED
            self._folder = None

    def __enter__(self) -> "ImapSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.logout()
            return

        try:
            self.logout()
        except MailFetchError as e:
            self._logger.debug(f"Error during logout after failure: {e}")

    def _require(self, expected: SessionState, operation: str) -> None:
        if self._state is not expected:
            raise SessionStateError(
                operation=operation,
                expected=expected.value,
                actual=self._state.value,
            )

    def _uid(self, command: str, *args: str):
        try:
            return self._imap.uid(command, *args)
        except imaplib.IMAP4.error as e:
            raise ProtocolError(f"UID {command} failed - {e}") from e
        except OSError as e:
            raise TransportError(server=self._server, port=self._port, message=str(e)) from e


def _describe(data) -> str:
    """将 IMAP 响应数据转为可读文本"""
    if not data:
        return "no response data"
    first = data[0]
    if isinstance(first, bytes):
        return first.decode("utf-8", errors="replace")
    return str(first)
