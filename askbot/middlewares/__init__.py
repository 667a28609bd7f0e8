from .error_logger import ErrorLogger
from .prompt import PromptMiddleware

__all__ = [
    "ErrorLogger",
    "PromptMiddleware",
]
