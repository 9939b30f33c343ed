"""Glob-style key matching with ``*`` and ``?``."""


def wildcard_match(pattern: str, key: str) -> bool:
    """Return whether ``key`` matches ``pattern``.

    ``?`` matches exactly one character and ``*`` matches any run,
    including an empty one. Matching uses the two-pointer greedy method
    with backtracking to the last star.
    """
    p = k = 0
    star = -1
    star_key = -1
    plen, klen = len(pattern), len(key)

    while k < klen:
        if p < plen and pattern[p] in ("?", key[k]):
            p += 1
            k += 1
        elif p < plen and pattern[p] == "*":
            star = p
            star_key = k
            p += 1
        elif star != -1:
            p = star + 1
            star_key += 1
            k = star_key
        else:
            return False

    while p < plen and pattern[p] == "*":
        p += 1

    return p == plen