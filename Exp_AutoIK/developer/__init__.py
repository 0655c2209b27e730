# Exp_AutoIK/developer/__init__.py
"""
Developer Tools Module

Category gates, the buffered IK logger, and the diagnostic events the
builder emits.
"""

from .dev_debug_gate import should_log, set_category_enabled, reset_gates
from .dev_logger import log_ik, get_log, export_log, clear_log, start_session, get_stats
from .diagnostics import DiagnosticEvent, DiagnosticsRecorder, log_event

__all__ = [
    'should_log',
    'set_category_enabled',
    'reset_gates',
    'log_ik',
    'get_log',
    'export_log',
    'clear_log',
    'start_session',
    'get_stats',
    'DiagnosticEvent',
    'DiagnosticsRecorder',
    'log_event',
]
