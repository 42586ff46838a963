"""Load capability and affordance overrides from YAML files."""
from __future__ import annotations

from typing import Any, Dict, FrozenSet

import yaml

from ..engine.policy import DEFAULT_AFFORDANCES, DEFAULT_CAPABILITIES, AccessPolicy
from ..engine.roles import Action, Affordance, AffordanceSet
from ..models.membership import Role


def _parse_role(key: Any) -> Role:
    if not isinstance(key, str):
        raise ValueError(f"Role {key!r}: role names must be strings")
    return Role.parse(key)


def _parse_actions(role: Role, values: Any) -> FrozenSet[Action]:
    if not isinstance(values, list):
        raise ValueError(f"Role {role.label}: capabilities must be a list")
    try:
        return frozenset(Action(v) for v in values)
    except ValueError as exc:
        raise ValueError(f"Role {role.label}: {exc}") from exc


def _parse_affordances(role: Role, data: Any) -> AffordanceSet:
    if not isinstance(data, dict):
        raise ValueError(f"Role {role.label}: affordances must be a mapping")
    shown = data.get("shown") or []
    disabled = data.get("disabled") or []
    if not isinstance(shown, list) or not isinstance(disabled, list):
        raise ValueError(f"Role {role.label}: shown and disabled must be lists")
    try:
        return AffordanceSet(
            frozenset(Affordance(v) for v in shown),
            frozenset(Affordance(v) for v in disabled),
        )
    except ValueError as exc:
        raise ValueError(f"Role {role.label}: {exc}") from exc


def parse_policy(data: Dict[str, Any]) -> AccessPolicy:
    """Merge the overrides in ``data`` over the default tables.

    Roles missing from the document keep their default entries. The merged
    policy is checked by :class:`AccessPolicy`, which raises ``ValueError``
    when the membership link invariants are broken.
    """
    if not isinstance(data, dict):
        raise ValueError("Policy file must contain a mapping")
    unknown = set(data) - {"capabilities", "affordances"}
    if unknown:
        raise ValueError(f"Unknown policy sections: {', '.join(sorted(unknown))}")

    capabilities = dict(DEFAULT_CAPABILITIES)
    for key, values in (data.get("capabilities") or {}).items():
        role = _parse_role(key)
        capabilities[role] = _parse_actions(role, values)

    affordances = dict(DEFAULT_AFFORDANCES)
    for key, values in (data.get("affordances") or {}).items():
        role = _parse_role(key)
        affordances[role] = _parse_affordances(role, values)

    return AccessPolicy(capabilities=capabilities, affordances=affordances)


def load_policy(path: str) -> AccessPolicy:
    """Parse a YAML policy file into an :class:`AccessPolicy`."""
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle)
    return parse_policy(data or {})
