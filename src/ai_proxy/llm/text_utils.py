"""
Response normalization utilities for the provider layer.

Backends disagree on where the generated text and the usage counters live.
These helpers walk nested JSON safely and turn optional usage metadata into
the integer token counts every GenerationResult carries.
"""

import math
from typing import Any, NamedTuple, Optional, Sequence

CHARS_PER_TOKEN = 4


class TokenUsage(NamedTuple):
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated: bool


def count_tokens_approximate(text: str) -> int:
    """
    Rough approximation of token count for text: ceil(chars / 4).

    This is a documented estimate used only when a backend omits usage
    metadata; it is never a measured value.

    Examples:
        >>> count_tokens_approximate("")
        0
        >>> count_tokens_approximate("hello")
        2
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def dig(payload: Any, path: Sequence[str | int]) -> Any:
    """
    Follow a path of dict keys / list indexes, returning None on any miss.

    Examples:
        >>> dig({"a": [{"b": 1}]}, ["a", 0, "b"])
        1
        >>> dig({"a": []}, ["a", 0, "b"]) is None
        True
    """
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def _as_count(value: Any) -> Optional[int]:
    # bool is an int subclass; a usage counter is never a flag
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def normalize_usage(
    prompt: str,
    text: str,
    prompt_tokens: Any = None,
    completion_tokens: Any = None,
    total_tokens: Any = None,
) -> TokenUsage:
    """
    Build token counts from optional backend usage metadata.

    - Missing prompt/completion counts are estimated independently from
      the prompt and the generated text.
    - A backend-reported total wins, even when it disagrees with the sum.
    - Otherwise total = input + output.

    Args:
        prompt: Prompt that was sent
        text: Generated text
        prompt_tokens: Backend prompt token count (or None)
        completion_tokens: Backend completion token count (or None)
        total_tokens: Backend total token count (or None)

    Returns:
        TokenUsage with estimated=True if any count had to be estimated
    """
    input_tokens = _as_count(prompt_tokens)
    output_tokens = _as_count(completion_tokens)
    reported_total = _as_count(total_tokens)
    estimated = False

    if input_tokens is None:
        input_tokens = count_tokens_approximate(prompt)
        estimated = True
    if output_tokens is None:
        output_tokens = count_tokens_approximate(text)
        estimated = True

    total = reported_total if reported_total is not None else input_tokens + output_tokens
    return TokenUsage(input_tokens, output_tokens, total, estimated)
