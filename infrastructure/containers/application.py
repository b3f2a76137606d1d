"""
应用容器（AppContainer）

管理应用层组件：查询处理器。
依赖 InfraContainer 获取基础设施。
"""

from dependency_injector import containers, providers

from application.handlers.mail.read_mailbox_handler import ReadMailboxHandler


class AppContainer(containers.DeclarativeContainer):
    """应用容器 - 管理应用层服务"""

    # 依赖配置容器
    config = providers.DependenciesContainer()

    # 依赖基础设施容器
    infra = providers.DependenciesContainer()

    # ============ 查询处理器 ============
    read_mailbox_handler = providers.Factory(
        ReadMailboxHandler,
        fetch_service=infra.mail_fetch_service,
        parser=infra.message_parser,
    )
