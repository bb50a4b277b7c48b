from __future__ import annotations

import json
import logging
import re
import warnings
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DIGIT_RUN_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class NumerologyRule:
    pattern: str
    replacement: str
    label: str


@dataclass(frozen=True)
class NumerologyResult:
    decorated_text: str
    matched_labels: tuple[str, ...] = field(default_factory=tuple)

    @property
    def title(self) -> str:
        return ", ".join(self.matched_labels)


# Boostbot-style defaults, used when no rule file is configured.
DEFAULT_RULES: tuple[NumerologyRule, ...] = (
    NumerologyRule(pattern=r"1337", replacement="🕶️", label="Leet"),
    NumerologyRule(pattern=r"420", replacement="✌️", label="Stoner"),
    NumerologyRule(pattern=r"21", replacement="₿", label="Bitcoin"),
    NumerologyRule(pattern=r"69", replacement="😏", label="Nice"),
    NumerologyRule(pattern=r"(?:88)+", replacement="🥨", label="Pretzels"),
    NumerologyRule(pattern=r"(?:11)+", replacement="🦆", label="Ducks in a row"),
    NumerologyRule(pattern=r"33", replacement="✨", label="Master number"),
)


def annotate(amount: int, rules: Sequence[NumerologyRule]) -> NumerologyResult:
    """Decorate a sat amount by running ``rules`` over its decimal digits.

    Rules run in order and each one sees the output of the previous rule.
    Digits no rule consumed are stripped from the final text. A rule whose
    pattern does not compile is skipped.
    """

    text = str(amount)
    matched: list[str] = []
    for rule in rules:
        try:
            compiled = re.compile(rule.pattern)
            # Replacement text is literal; no group expansion.
            candidate = compiled.sub(lambda _match, value=rule.replacement: value, text)
        except (re.error, TypeError) as exc:
            logger.debug("skipping numerology rule %r: %s", rule.label, exc)
            continue
        if candidate != text:
            matched.append(rule.label)
        text = candidate
    text = _DIGIT_RUN_RE.sub("", text)
    return NumerologyResult(decorated_text=text, matched_labels=tuple(matched))


def _rule_from_record(record: Any) -> NumerologyRule | None:
    if not isinstance(record, dict):
        return None
    pattern = record.get("regex")
    replacement = record.get("emoji")
    label = record.get("name")
    if not isinstance(pattern, str) or not pattern:
        return None
    if not isinstance(replacement, str):
        return None
    if not isinstance(label, str):
        label = pattern
    return NumerologyRule(pattern=pattern, replacement=replacement, label=label)


def parse_rules(data: Any) -> tuple[NumerologyRule, ...]:
    if not isinstance(data, list):
        raise ValueError("numerology rules must be a list")
    rules: list[NumerologyRule] = []
    for position, record in enumerate(data):
        rule = _rule_from_record(record)
        if rule is None:
            warnings.warn(
                f"Invalid numerology rule at position {position}: {record!r}",
                RuntimeWarning,
                stacklevel=2,
            )
            continue
        rules.append(rule)
    return tuple(rules)


def load_rules(path: Path | None = None) -> tuple[NumerologyRule, ...]:
    """Load an ordered rule list from a ``numerology.json`` style file.

    Records look like ``{"regex": "69", "emoji": "😏", "name": "Nice"}``.
    Without a path the built-in defaults are returned.
    """

    if path is None:
        return DEFAULT_RULES
    rules_path = Path(path).expanduser()
    try:
        raw = rules_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"unable to read numerology rules: {rules_path}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid numerology json") from exc
    rules = parse_rules(data)
    logger.info("loaded %d numerology rules from %s", len(rules), rules_path)
    return rules
