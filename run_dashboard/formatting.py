"""Formatting helpers for displaying test results."""


def truncate_output(output: str, max_length: int = 100) -> str:
    """Shorten long output to ``max_length`` characters followed by an ellipsis."""
    if len(output) <= max_length:
        return output
    return f"{output[:max_length]}..."


def format_duration(duration: int | float | None) -> str:
    """Format a duration in milliseconds for display."""
    if not duration:
        return "N/A"
    if duration < 1000:
        return f"{duration}ms"
    return f"{duration / 1000:.1f}s"
