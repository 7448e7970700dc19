"""
Timing utilities.

Helpers for measuring pipeline stages and reporting service uptime.
"""

import time


def elapsed_ms(start: float) -> int:
    """
    Milliseconds elapsed since a time.perf_counter() reading.
    
    Args:
        start: Value previously returned by time.perf_counter()
    
    Returns:
        Whole milliseconds
    """
    return int((time.perf_counter() - start) * 1000)


def format_uptime(seconds: float) -> str:
    """
    Format uptime in human-readable format (e.g. "1d 2h 30m 45s").
    
    Zero-valued leading units are omitted; seconds are always shown.
    """
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)
    
    parts = [f'{value}{unit}' for value, unit in ((days, 'd'), (hours, 'h'), (minutes, 'm')) if value > 0]
    parts.append(f'{secs}s')
    return ' '.join(parts)
