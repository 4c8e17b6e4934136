from .error_handler import DomainError, ServiceUnavailableError, register_exception_handlers

__all__ = ["DomainError", "ServiceUnavailableError", "register_exception_handlers"]
