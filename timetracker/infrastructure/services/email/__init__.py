from .console_sender import ConsoleEmailSender, SentEmail
from .smtp_sender import SmtpEmailSender

__all__ = ["ConsoleEmailSender", "SentEmail", "SmtpEmailSender"]
