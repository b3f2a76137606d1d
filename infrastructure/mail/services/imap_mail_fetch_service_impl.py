"""IMAP 邮件收取服务实现"""

import ssl
from typing import Any, List, Optional

from common.logging import get_logger
from domain.mailbox.value_objects.mailbox_config import MailboxConfig
from domain.mail.services.mail_fetch_service import MailFetchService
from domain.mail.value_objects.raw_message import RawMessage
from infrastructure.mail.services.imap_session import ImapSession


class ImapMailFetchServiceImpl(MailFetchService):
    """
    IMAP 邮件收取服务实现

    使用 Python 标准库 imaplib 实现只读收取：
    - SSL/TLS 安全连接（端口 993）
    - EXAMINE 只读选择文件夹
    - UID SEARCH ALL 枚举全部邮件
    - BODY.PEEK[] 收取，不改变已读状态
    - 所有退出路径上都会登出

    不做重试：任何错误都直接抛给调用方。
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
        logger: Optional[Any] = None,
    ):
        """
        初始化 IMAP 邮件收取服务

        Args:
            timeout: 套接字超时（秒），None 表示使用 imaplib 默认行为
            ssl_context: 可选的 SSL 上下文
            logger: 可选的日志记录器
        """
        self._timeout = timeout
        self._ssl_context = ssl_context
        self._logger = logger or get_logger(__name__)

    def fetch_all(self, config: MailboxConfig) -> List[RawMessage]:
        """
        收取所选文件夹中的全部邮件

        Args:
            config: 邮箱连接配置

        Returns:
            按服务器顺序排列的原始邮件列表
        """
        self._logger.debug(f"Reading {config.selection} from {config.connection_string}")

        with self._session(config) as session:
            session.login(config.username, config.password)
            session.select(config.selection)

            uids = session.search_all()
            if not uids:
                self._logger.debug(f"No messages in {config.selection}")
                return []

            self._logger.info(f"Found {len(uids)} message(s) in {config.selection}")

            messages = []
            for uid in uids:
                raw = RawMessage(uid=uid, data=session.fetch_peek(uid))
                self._logger.debug(f"Fetched uid={raw.uid} ({raw.size} bytes)")
                messages.append(raw)

            return messages

    def _session(self, config: MailboxConfig) -> ImapSession:
        return ImapSession.open(
            config.host,
            config.port,
            timeout=self._timeout,
            ssl_context=self._ssl_context,
            logger=self._logger,
        )
