"""
基础设施容器（InfraContainer）

管理邮件收取与解析的具体实现。
依赖 ConfigContainer 获取配置。
"""

from dependency_injector import containers, providers

from infrastructure.mail.services.imap_mail_fetch_service_impl import ImapMailFetchServiceImpl
from infrastructure.mail.services.email_message_parser_impl import EmailMessageParserImpl


class InfraContainer(containers.DeclarativeContainer):
    """基础设施容器 - 管理技术实现"""

    # 依赖配置容器
    config = providers.DependenciesContainer()

    # ============ 邮件 ============

    # IMAP 收取服务（每次调用新实例，会话不跨调用复用）
    mail_fetch_service = providers.Factory(
        ImapMailFetchServiceImpl,
        timeout=config.settings.provided.imap_timeout,
    )

    # 邮件解析服务（无状态）
    message_parser = providers.Singleton(EmailMessageParserImpl)
