from src.config.settings import settings
from src.email_service.base import EmailRelayError, EmailRelayNotConfiguredError, EmailServiceBase
from src.email_service.email_logger import NoOpEmailLogger, SQLEmailLogger
from src.email_service.emailjs_service import EmailJSService
from src.email_service.templates import EmailTemplates


def get_email_service() -> EmailServiceBase:
    email_logger = SQLEmailLogger() if settings.log_emails else NoOpEmailLogger()
    return EmailJSService(config=settings, email_logger=email_logger)


__all__ = [
    "EmailRelayError",
    "EmailRelayNotConfiguredError",
    "EmailServiceBase",
    "EmailTemplates",
    "get_email_service",
]
