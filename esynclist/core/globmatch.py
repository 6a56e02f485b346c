# esynclist/core/globmatch.py
"""
Glob pattern matching for source identifiers.

Patterns:
    *         zero or more characters
    ?         any single character
    [set]     any character in the set, ranges written as a-z
    [^set]    any character NOT in the set
    [-set]    literal hyphen plus the set
    []set]    literal close bracket plus the set
    \\c       the character c, including pattern characters
    c         any other character matches itself

Matching is case-sensitive and anchored at both ends. Malformed patterns
(unterminated sets, a trailing backslash) simply do not match.
"""
from __future__ import annotations

NEGATE = "^"


def globmatch(string: str, pattern: str) -> bool:
    """True when the whole of `string` matches `pattern`."""
    return _match(string, 0, pattern, 0)


def _match(string: str, s: int, pattern: str, p: int) -> bool:
    n = len(string)
    m = len(pattern)

    while p < m:
        if s >= n and pattern[p] != "*":
            return False

        c = pattern[p]
        p += 1

        if c == "*":
            while p < m and pattern[p] == "*":
                p += 1

            if p >= m:
                return True

            # Fast-forward to the next literal before backtracking
            if pattern[p] not in "?[\\":
                while s < n and pattern[p] != string[s]:
                    s += 1

            while s < n:
                if _match(string, s, pattern, p):
                    return True
                s += 1
            return False

        if c == "?":
            pass

        elif c == "[":
            # [z-a] is the set {z, a}: ranges are inclusive of both ends only
            ch = string[s]
            negate = p < m and pattern[p] == NEGATE
            if negate:
                p += 1

            matched = False
            while not matched and p < m:
                c = pattern[p]
                p += 1
                if p >= m:
                    return False

                if pattern[p] == "-":  # c-c
                    p += 1
                    if p >= m:
                        return False
                    if pattern[p] != "]":
                        if ch == c or ch == pattern[p] or c < ch < pattern[p]:
                            matched = True
                    else:  # c-]
                        if ch >= c:
                            matched = True
                        break
                else:  # cc or c]
                    if c == ch:
                        matched = True
                    if pattern[p] != "]":
                        if pattern[p] == ch:
                            matched = True
                    else:
                        break

            if negate == matched:
                return False

            # Skip past the rest of the set
            while p < m and pattern[p] != "]":
                p += 1
            if p >= m:
                return False
            p += 1

        else:
            if c == "\\":
                if p >= m:
                    return False
                c = pattern[p]
                p += 1
            if c != string[s]:
                return False

        s += 1

    return s >= n
