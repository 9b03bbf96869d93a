"""Base domain exceptions.

所有领域异常都应继承自 DomainException，并可以通过定义 error_code
类属性来指定错误代码，供驱动程序输出运行摘要时使用。
"""


class DomainException(Exception):
    """Base exception for all domain errors.

    子类可以通过定义以下类属性来自定义错误信息：
    - error_code: 错误代码字符串（默认 "DOMAIN_ERROR"）
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)
