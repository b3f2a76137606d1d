"""邮件领域模块

该模块包含邮件读取的领域模型，包括：
- Message, RawMessage 值对象
- SessionState 会话状态枚举
- MailFetchService 收取服务接口
- MessageParser 解析服务接口
"""
