"""
Custom Exceptions
自定义异常类
"""


class ThreadTranslatorError(Exception):
    """翻译流水线基础异常类"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(ThreadTranslatorError):
    """配置错误"""
    pass


class CandidateListNotFoundError(ThreadTranslatorError):
    """找不到候选帖子列表 (唯一的致命启动错误)"""

    def __init__(self, message: str, directory: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.directory = directory


class ScraperError(ThreadTranslatorError):
    """抓取器错误"""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class StorageError(ThreadTranslatorError):
    """存储错误"""
    pass


class LedgerCorruptError(StorageError):
    """翻译索引无法读取或格式错误"""
    pass


class TranslationServiceError(ThreadTranslatorError):
    """翻译服务调用错误"""

    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider


class ServiceUnavailableError(TranslationServiceError):
    """网络错误或超时"""
    pass


class MalformedResponseError(TranslationServiceError):
    """服务有响应但内容无法解析"""
    pass
