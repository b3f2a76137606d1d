"""读取邮箱处理器"""

from typing import Any, List, Optional

from application.queries.mail.read_mailbox import ReadMailboxQuery
from common.logging import get_logger
from domain.mailbox.value_objects.mailbox_config import MailboxConfig
from domain.mail.services.mail_fetch_service import MailFetchService
from domain.mail.services.message_parser import MessageParseError, MessageParser
from domain.mail.value_objects.message import Message


class ReadMailboxHandler:
    """
    读取邮箱处理器

    处理 ReadMailboxQuery：收取文件夹中的全部原始邮件，再逐封解析。

    整批要么全部成功，要么在第一个错误处失败：任意一封邮件解析失败，
    异常直接抛出，不返回部分结果。
    """

    def __init__(
        self,
        fetch_service: MailFetchService,
        parser: MessageParser,
        logger: Optional[Any] = None,
    ):
        """
        初始化处理器

        Args:
            fetch_service: 邮件收取服务
            parser: 邮件解析服务
            logger: 可选的日志记录器
        """
        self._fetch_service = fetch_service
        self._parser = parser
        self._logger = logger or get_logger(__name__)

    def handle(self, query: ReadMailboxQuery) -> List[Message]:
        """
        处理查询请求

        Args:
            query: 查询参数

        Returns:
            按服务器顺序排列的 Message 列表

        Raises:
            MailFetchError: 收取失败
            MessageParseError: 任一邮件解析失败
        """
        raw_messages = self._fetch_service.fetch_all(query.config)

        messages: List[Message] = []
        for raw in raw_messages:
            try:
                messages.append(self._parser.parse(raw.data))
            except MessageParseError as e:
                self._logger.error(f"Failed to parse message uid={raw.uid}: {e}")
                raise

        self._logger.info(f"Parsed {len(messages)} message(s) from {query.config.selection}")
        return messages

    def read_mailbox(self, config: MailboxConfig) -> List[Message]:
        """handle(ReadMailboxQuery(config)) 的简写"""
        return self.handle(ReadMailboxQuery(config=config))
