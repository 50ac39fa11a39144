from typing import List, Sequence

# Start-of-sequence token
SOS = "__sos__"

# End-of-sequence token
EOS = "__eos__"


def sos(tokens: Sequence[str], n: int = 1) -> List[str]:
    """
    Prefix tokens with start-of-sequence sentinels.

    Args:
        tokens: Token sequence
        n: Number of sentinels to add (use the model order to give the
            first real token a full context)

    Returns:
        New list with `n` SOS tokens in front

    Examples:
        >>> sos(["eat", "cakes"])
        ['__sos__', 'eat', 'cakes']
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    return [SOS] * n + list(tokens)


def eos(tokens: Sequence[str]) -> List[str]:
    """
    Suffix tokens with the end-of-sequence sentinel.

    Examples:
        >>> eos(["eat", "cakes"])
        ['eat', 'cakes', '__eos__']
    """
    return list(tokens) + [EOS]
