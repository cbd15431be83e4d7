"""
Collaborating services
"""

from .mailer import ResetMailer, LoggingMailer, build_reset_link, get_mailer

__all__ = ["ResetMailer", "LoggingMailer", "build_reset_link", "get_mailer"]
