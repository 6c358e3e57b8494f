"""
Placeholder translation for drivers using the ``format`` paramstyle.

Clients write ``?`` for every positional parameter regardless of backend.
psycopg and PyMySQL expect ``%s`` and treat every other ``%`` as a format
directive once parameters are supplied, so literal percent signs are doubled.
Quoted strings, quoted identifiers and comments are copied through (with ``%``
doubled) so a ``?`` inside them is not mistaken for a placeholder.

Note: PostgreSQL's jsonb ``?`` operators are indistinguishable from
placeholders here; use ``jsonb_exists()`` instead when binding parameters.
"""

from __future__ import annotations

from typing import List


def _quoted_end(sql: str, start: int, quote: str, backslash_escapes: bool) -> int:
    i = start + 1
    n = len(sql)
    while i < n:
        ch = sql[i]
        if backslash_escapes and ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return n


def qmark_to_format(sql: str, *, backslash_escapes: bool = False) -> str:
    out: List[str] = []
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]
        if ch in ("'", '"', "`"):
            end = _quoted_end(sql, i, ch, backslash_escapes and ch != "`")
            out.append(sql[i:end].replace("%", "%%"))
            i = end
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            end = n if end == -1 else end
            out.append(sql[i:end].replace("%", "%%"))
            i = end
        elif sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append(sql[i:end].replace("%", "%%"))
            i = end
        elif ch == "?":
            out.append("%s")
            i += 1
        elif ch == "%":
            out.append("%%")
            i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)
