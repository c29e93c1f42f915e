def format_duration(seconds: int) -> str:
    """
    Format a number of seconds as a countdown string.

    Args:
        seconds: Non-negative number of seconds

    Returns:
        "MM:SS", or "HH:MM:SS" from one hour on
    """
    hours, remainder = divmod(max(int(seconds), 0), 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"
