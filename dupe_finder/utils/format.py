"""
Human-readable formatting for sizes, durations and ratios.
"""


def format_size(num_bytes: int) -> str:
    """Sizes are shown in MB below one gigabyte, GB above."""
    if num_bytes >= 1000 ** 3:
        return f"{num_bytes / 1000 ** 3:.2f} GB"
    return f"{num_bytes / 1000 ** 2:.1f} MB"


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return "less than 1 minute"
    if seconds < 3600:
        return f"about {int(seconds // 60)} minutes"
    return f"about {int(seconds // 3600)} hours"


def format_percentage(value: float) -> str:
    return f"{int(value * 100)}%"
