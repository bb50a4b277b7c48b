from __future__ import annotations

from rich import print
from rich.markup import escape

from boostwatch.numerology import NumerologyRule, annotate


def numerology_cmd(amount: int, *, rules: tuple[NumerologyRule, ...]) -> None:
    """Show the numerology decoration for a sat amount."""

    result = annotate(amount, rules)
    if not result.matched_labels:
        print(f"{amount:,} sats: no numerology")
        return
    print(f"{amount:,} sats: {escape(result.decorated_text)}")
    for label in result.matched_labels:
        print(f"- {escape(label)}")
