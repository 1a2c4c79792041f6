from __future__ import annotations

from ..core.git_runner import require_ok
from ..tools.common import diff_to_dict, make_engine


def diff_range(
    root: str = ".",
    base: str = "HEAD~1",
    head: str = "HEAD",
    *,
    triple_dot: bool = False,
) -> dict:
    """
    Parsed diff between two refs.
    - base..head : changes in head not in base
    - base...head: changes from merge-base(base, head) to head
    """
    engine = make_engine(root)

    start = base
    if triple_dot:
        res = require_ok(
            engine.runner.run(["merge-base", base, head]),
            context="diff_range(merge-base)",
        )
        start = res.stdout.strip()

    parsed = engine.get_diff_between_commits(start, head)
    return {
        "root": str(engine.root),
        "range": f"{base}{'...' if triple_dot else '..'}{head}",
        "base": base,
        "head": head,
        "triple_dot": triple_dot,
        **diff_to_dict(parsed),
    }
