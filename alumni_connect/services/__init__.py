"""Convenience exports for the state layer."""
from .confirmation_gate import ConfirmationGate, GateState
from .entity_cache import EntityCache, MutationLocks
from .errors import AlumniConnectError, ConcurrentMutation, FetchFailure, MutationFailure, ValidationFailure
from .mutation_executor import MutationExecutor, MutationResult
from .mutation_policy import MUTATION_POLICIES, MutationKind, MutationPolicy, policy_for
from .profile_form import ExperienceEntry, ProfileEditForm
from .session import SessionContext
from .validation import SchemaRuleSet, ValidationRuleSet
from .views import DashboardView, PostFeedView, PostListView, PostThreadView, ProfileFeedView

__all__ = [
    "ConfirmationGate",
    "GateState",
    "EntityCache",
    "MutationLocks",
    "AlumniConnectError",
    "ConcurrentMutation",
    "FetchFailure",
    "MutationFailure",
    "ValidationFailure",
    "MutationExecutor",
    "MutationResult",
    "MUTATION_POLICIES",
    "MutationKind",
    "MutationPolicy",
    "policy_for",
    "ExperienceEntry",
    "ProfileEditForm",
    "SessionContext",
    "SchemaRuleSet",
    "ValidationRuleSet",
    "DashboardView",
    "PostFeedView",
    "PostListView",
    "PostThreadView",
    "ProfileFeedView",
]
