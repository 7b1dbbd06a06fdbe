"""
Access policy for listings and property message threads.

Every protected operation is looked up in a policy table that names the
relationships a principal may hold to be allowed through. Handlers never
branch on roles or ownership themselves; they ask the policy for a Decision
and enforce it.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional
from marketplace.config import (
    THREAD_POLICY_OWNER_OR_BUYER,
    THREAD_POLICY_OWNER_OR_PARTICIPANT,
    Settings,
)
from marketplace.models.user import UserRole
from marketplace.utils.exceptions import (
    ForbiddenError,
    PropertyNotFoundError,
    UnauthorizedError,
)
import enum
import logging
import uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated identity attached to a request."""
    id: uuid.UUID
    role: UserRole


@dataclass(frozen=True)
class PropertyFacts:
    """What the policy needs to know about a target property."""
    owner_id: uuid.UUID
    principal_has_posted: bool = False


class Action(str, enum.Enum):
    BROWSE_PROPERTIES = "browse_properties"
    VIEW_PROPERTY = "view_property"
    CREATE_PROPERTY = "create_property"
    LIST_OWN_PROPERTIES = "list_own_properties"
    LIST_INBOX = "list_inbox"
    POST_MESSAGE = "post_message"
    VIEW_THREAD = "view_thread"


class Relationship(str, enum.Enum):
    ANYONE = "anyone"
    AUTHENTICATED = "authenticated"
    OWNER = "owner"
    BUYER_ROLE = "buyer_role"
    THREAD_PARTICIPANT = "thread_participant"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    DENY_UNAUTHENTICATED = "deny_unauthenticated"
    DENY_FORBIDDEN = "deny_forbidden"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PolicyRule:
    requires_principal: bool
    requires_property: bool
    relationships: FrozenSet[Relationship]


# Who besides the owner may read a thread. The owner_or_buyer entry grants
# every BUYER access to every thread, not only threads they posted in.
THREAD_VISIBILITY: Dict[str, FrozenSet[Relationship]] = {
    THREAD_POLICY_OWNER_OR_BUYER: frozenset({Relationship.OWNER, Relationship.BUYER_ROLE}),
    THREAD_POLICY_OWNER_OR_PARTICIPANT: frozenset({Relationship.OWNER, Relationship.THREAD_PARTICIPANT}),
}


def build_policy_table(thread_policy: str = THREAD_POLICY_OWNER_OR_BUYER) -> Dict[Action, PolicyRule]:
    """Build the action -> rule table for the given thread-visibility setting."""
    if thread_policy not in THREAD_VISIBILITY:
        raise ValueError(f"Unknown message thread policy: {thread_policy}")

    anyone = frozenset({Relationship.ANYONE})
    authenticated = frozenset({Relationship.AUTHENTICATED})

    return {
        Action.BROWSE_PROPERTIES: PolicyRule(False, False, anyone),
        Action.VIEW_PROPERTY: PolicyRule(False, True, anyone),
        Action.CREATE_PROPERTY: PolicyRule(True, False, authenticated),
        Action.LIST_OWN_PROPERTIES: PolicyRule(True, False, authenticated),
        Action.LIST_INBOX: PolicyRule(True, False, authenticated),
        Action.POST_MESSAGE: PolicyRule(True, True, authenticated),
        Action.VIEW_THREAD: PolicyRule(True, True, THREAD_VISIBILITY[thread_policy]),
    }


class AccessPolicy:
    """
    Evaluates principal/action/resource triples against a policy table.

    Evaluation order is fixed: a missing principal is reported before a
    missing property, and a missing property before a failed relationship.
    """

    def __init__(self, table: Optional[Dict[Action, PolicyRule]] = None):
        self.table = table if table is not None else build_policy_table()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AccessPolicy":
        return cls(build_policy_table(settings.message_thread_policy))

    def rule_for(self, action: Action) -> PolicyRule:
        return self.table[action]

    def needs_participation(self, action: Action) -> bool:
        """Whether evaluating this action requires knowing if the principal posted in the thread."""
        return Relationship.THREAD_PARTICIPANT in self.rule_for(action).relationships

    def evaluate(
        self,
        principal: Optional[Principal],
        action: Action,
        resource: Optional[PropertyFacts] = None
    ) -> Decision:
        """
        Decide whether principal may perform action on resource.

        Args:
            principal: Authenticated identity, or None for anonymous requests
            action: Operation being attempted
            resource: Facts about the target property, or None if it does not exist

        Returns:
            Decision for the request
        """
        rule = self.rule_for(action)

        if rule.requires_principal and principal is None:
            return Decision.DENY_UNAUTHENTICATED

        if rule.requires_property and resource is None:
            return Decision.NOT_FOUND

        for relationship in rule.relationships:
            if self._holds(relationship, principal, resource):
                return Decision.ALLOW

        return Decision.DENY_FORBIDDEN

    def enforce(
        self,
        principal: Optional[Principal],
        action: Action,
        resource: Optional[PropertyFacts] = None
    ) -> None:
        """
        Evaluate and raise the matching API exception for any non-ALLOW decision.

        Raises:
            UnauthorizedError: DENY_UNAUTHENTICATED
            ForbiddenError: DENY_FORBIDDEN
            PropertyNotFoundError: NOT_FOUND
        """
        decision = self.evaluate(principal, action, resource)

        if decision == Decision.ALLOW:
            return

        logger.info(
            f"Access denied: {action.value} -> {decision.value}",
            extra={
                "action": action.value,
                "decision": decision.value,
                "principal_id": str(principal.id) if principal else None,
            }
        )

        if decision == Decision.DENY_UNAUTHENTICATED:
            raise UnauthorizedError()
        if decision == Decision.NOT_FOUND:
            raise PropertyNotFoundError()
        raise ForbiddenError()

    @staticmethod
    def _holds(
        relationship: Relationship,
        principal: Optional[Principal],
        resource: Optional[PropertyFacts]
    ) -> bool:
        if relationship == Relationship.ANYONE:
            return True

        if principal is None:
            return False

        if relationship == Relationship.AUTHENTICATED:
            return True
        if relationship == Relationship.BUYER_ROLE:
            return principal.role == UserRole.BUYER
        if resource is None:
            return False
        if relationship == Relationship.OWNER:
            return resource.owner_id == principal.id
        if relationship == Relationship.THREAD_PARTICIPANT:
            return resource.principal_has_posted

        return False
