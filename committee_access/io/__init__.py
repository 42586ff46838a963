"""Input/output helpers for :mod:`committee_access`."""

from .fixture_loader import load_fixtures, load_store
from .policy_loader import load_policy, parse_policy

__all__ = ["load_fixtures", "load_store", "load_policy", "parse_policy"]
