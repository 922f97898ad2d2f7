"""
UI Package
Qt bridge between the core and the widgets
"""

from .session_bridge import SessionBridge

__all__ = [
    'SessionBridge'
]
