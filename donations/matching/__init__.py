"""
Matching subpackage for the Donations domain.

Public API:
- split_donation
- SplitResult, Fulfillment
- MatchingPolicy
"""

from .engine import Fulfillment, SplitResult, assemble_result, split_donation
from .policy import InvalidPolicyError, MatchingPolicy, default_policy, policy_from_env, resolve_policy

__all__ = [
    "split_donation",
    "assemble_result",
    "SplitResult",
    "Fulfillment",
    "MatchingPolicy",
    "InvalidPolicyError",
    "default_policy",
    "policy_from_env",
    "resolve_policy",
]
