"""
Developer Logger - Fast Memory Buffer Logging System

Diagnostics for the IK builder go to an in-memory buffer instead of the
console. The buffer is exported to a file on demand.

Usage:
    from Exp_AutoIK.developer.dev_logger import log_ik, export_log, clear_log

    # During a build (fast - just appends to buffer)
    log_ik("AXIS", "Left knee: X-axis (90% confidence)")
    log_ik("IK-CHAIN", "Incomplete right leg - skipping IK chain", level="WARNING")

    # Later
    export_log("/tmp/autoik_diagnostics.txt")
    clear_log()
"""

import time
from typing import Dict, List, Optional
from .dev_debug_gate import should_log

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Global log buffer
_log_buffer: List[Dict] = []

# Session tracking
_session_start_time: Optional[float] = None
_sequence: int = 0

# Stats
_total_logs: int = 0
_logs_per_category: Dict[str, int] = {}


def start_session():
    """Reset session tracking and drop buffered entries."""
    global _session_start_time, _sequence, _total_logs
    _session_start_time = time.perf_counter()
    _sequence = 0
    _total_logs = 0
    _logs_per_category.clear()
    _log_buffer.clear()


def log_ik(category: str, message: str, level: str = "INFO"):
    """
    Fast in-memory logging. Zero I/O.

    Args:
        category: Log category (e.g., "AXIS", "IK-CHAIN")
        message: The log message
        level: "DEBUG", "INFO", "WARNING" or "ERROR"
    """
    global _sequence, _total_logs

    if level not in LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    if not should_log(category):
        return

    _sequence += 1
    _log_buffer.append({
        'seq': _sequence,
        'time': time.perf_counter(),
        'category': category,
        'level': level,
        'message': message,
    })

    _total_logs += 1
    _logs_per_category[category] = _logs_per_category.get(category, 0) + 1


def get_log(category: Optional[str] = None) -> List[Dict]:
    """Copy of buffered entries, optionally filtered by category."""
    if category is None:
        return list(_log_buffer)
    return [entry for entry in _log_buffer if entry['category'] == category]


def export_log(filepath: str) -> bool:
    """
    Write entire buffer to file.

    Returns:
        True if successful, False if the buffer is empty
    """
    if not _log_buffer:
        return False

    start_time = _session_start_time if _session_start_time else _log_buffer[0]['time']

    with open(filepath, 'w', encoding='utf-8') as f:
        # Header
        f.write("=" * 80 + "\n")
        f.write("AUTO IK DIAGNOSTICS LOG\n")
        f.write(f"Total Logs: {_total_logs}\n")
        f.write("=" * 80 + "\n\n")

        # Category breakdown
        f.write("Logs per Category:\n")
        for cat, count in sorted(_logs_per_category.items()):
            f.write(f"  {cat}: {count}\n")
        f.write("\n" + "=" * 80 + "\n\n")

        # Log entries
        for entry in _log_buffer:
            elapsed = entry['time'] - start_time
            f.write(f"[{entry['category']} {entry['level']} #{entry['seq']:04d} "
                    f"T{elapsed:.3f}s] {entry['message']}\n")

        # Footer
        f.write("\n" + "=" * 80 + "\n")
        f.write(f"END OF LOG - {_total_logs} entries\n")
        f.write("=" * 80 + "\n")

    return True


def clear_log():
    """Clear the buffer."""
    _log_buffer.clear()


def get_buffer_size() -> int:
    """Get current number of entries in buffer."""
    return len(_log_buffer)


def get_stats() -> Dict:
    """Get current session statistics."""
    return {
        'total_logs': _total_logs,
        'buffer_size': len(_log_buffer),
        'categories': dict(_logs_per_category),
    }
