"""领域异常定义"""

from typing import Any


class DomainException(Exception):
    """领域异常基类"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidValueObjectException(DomainException):
    """值对象验证失败"""

    def __init__(self, value_object_type: str, value: Any, reason: str):
        self.value_object_type = value_object_type
        self.value = value
        self.reason = reason
        super().__init__(reason)

    def __str__(self) -> str:
        return f"Invalid {self.value_object_type} ({self.value!r}): {self.reason}"
