# SPDX-License-Identifier: BSD-3-Clause

"""
Matching of URL paths against C{allow}/C{disallow} patterns.

A pattern is anchored at the start of the path. Two characters are special:
  - C{*} matches any sequence of characters, including the empty one
  - C{$} at the very end of a pattern anchors it to the end of the path;
    anywhere else it is an ordinary character

Patterns and paths are both under the control of the site owner, so the
matching must not blow up on patterns like C{/*a*a*a*a*b}. Instead of
backtracking, we keep the sorted set of path offsets that the pattern
consumed so far can reach, which bounds the work to
C{O(len(path) * len(pattern))}.
"""

from __future__ import annotations

NO_MATCH_PRIORITY = -1
"""Match priority that indicates the pattern did not match."""


def matches(path: str, pattern: str) -> bool:
    """
    Checks whether a URL path matches a robots.txt pattern.

    @param path:
        Path, parameters and query of a URL, starting with C{/}.
    @param pattern:
        Pattern from an C{allow} or C{disallow} line.
    @return:
        C{True} iff C{path} matches C{pattern}.
    """

    path_len = len(path)
    last = len(pattern) - 1
    # Sorted offsets in path reachable after the pattern prefix seen so far.
    frontier = [0]
    for idx, char in enumerate(pattern):
        if char == "$" and idx == last:
            return frontier[-1] == path_len
        if char == "*":
            frontier = list(range(frontier[0], path_len + 1))
        else:
            frontier = [
                offset + 1
                for offset in frontier
                if offset < path_len and path[offset] == char
            ]
            if not frontier:
                return False
    return True


def match_priority(path: str, pattern: str) -> int:
    """
    Returns the priority of a pattern match: the length of C{pattern}
    if it matches C{path}, L{NO_MATCH_PRIORITY} otherwise.

    When several rules match, the one with the longest pattern is the most
    specific and wins.
    """
    return len(pattern) if matches(path, pattern) else NO_MATCH_PRIORITY
