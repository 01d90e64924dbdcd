"""Rule evaluation for libraries and conditional arguments."""

from typing import Optional, Sequence

from .models import Rule


def rules_allow(rules: Optional[Sequence[Rule]], os_name: str) -> bool:
    """Decide whether a rule-guarded item is enabled on ``os_name``.

    No rule list at all means allowed. Otherwise the verdict starts out
    disallowed and every rule that applies overwrites it, so the last
    applicable rule wins and a list where nothing applies disallows.
    """
    if rules is None:
        return True
    allowed = False
    for rule in rules:
        if rule.applies_to(os_name):
            allowed = rule.action == "allow"
    return allowed
