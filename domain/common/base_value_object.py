"""值对象基类"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BaseValueObject:
    """
    值对象基类

    子类使用 @dataclass(frozen=True) 声明，构造完成后自动调用 validate()，
    验证失败时抛出 InvalidValueObjectException。
    """

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """验证值对象（子类按需覆盖）"""
