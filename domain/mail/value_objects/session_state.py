"""IMAP 会话状态枚举"""

from enum import Enum


class SessionState(str, Enum):
    """IMAP 会话状态"""

    CONNECTED = "connected"
    """已建立 TLS 连接并收到服务器问候"""

    AUTHENTICATED = "authenticated"
    """登录成功"""

    FOLDER_SELECTED = "folder_selected"
    """已选择文件夹，可以搜索和收取邮件"""

    CLOSED = "closed"
    """已登出，会话不可再用"""
