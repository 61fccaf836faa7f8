"""
Notification services package
"""

from .reminder_service import reminder_service

__all__ = ['reminder_service']
