import re


def estimate_tokens(text: str) -> int:
    """
    Estimate token count from text using a simple word-based approximation

    Args:
        text: Prompt or model reply to estimate tokens for

    Returns:
        Estimated token count, 0 for empty text
    """
    if not text:
        return 0
    # JSON replies are mostly punctuation, count those runs as words too
    words = re.findall(r"\w+|[^\w\s]+", text)
    return int(len(words) * 1.3)
