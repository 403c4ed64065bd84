"""Worklist that discovers and expands composite types exactly once."""

import logging
from collections import deque
from collections.abc import Callable

from .errors import NamingCollisionError
from .schema import MessageDescriptor, MessageField, Provenance
from .types import CompositeMember, TypeDescriptor

logger = logging.getLogger(__name__)

MemberLookup = Callable[[TypeDescriptor], list[CompositeMember]]
FieldBuilder = Callable[[list[CompositeMember], str], list[MessageField]]


class Registry:
    """Breadth-first registry of the messages of one generation run.

    Composite types are keyed by nominal id (their canonical name). Membership
    in `processed` is checked before enqueueing, so every id enters the queue
    at most once and cyclic type graphs terminate.
    """

    def __init__(self, allow_name_collisions: bool = False):
        self.processed: set[str] = set()
        self.queue: deque[str] = deque()
        self.allow_name_collisions = allow_name_collisions
        self._types: dict[str, tuple[TypeDescriptor, str]] = {}
        self._order: list[str] = []
        self._messages: dict[str, MessageDescriptor] = {}
        self._names: dict[str, str] = {}  # message name -> owning identity
        self._synthesized: dict[str, str] = {}  # identity -> message name

    def reserve(self, name: str, identity: str) -> bool:
        """Claim a message name for an identity.

        Returns False when the name already belongs to another identity and
        collisions are allowed; raises NamingCollisionError otherwise.
        """
        owner = self._names.get(name)
        if owner is None:
            self._names[name] = identity
            return True
        if owner == identity:
            return True
        if not self.allow_name_collisions:
            raise NamingCollisionError(name, owner, identity)
        logger.warning("Message name %s already used by %s, reusing it for %s", name, owner, identity)
        return False

    def enqueue(self, nominal_id: str, t: TypeDescriptor, name: str) -> bool:
        """Queue a composite type for expansion unless it was seen before."""
        if nominal_id in self.processed:
            return False
        self.processed.add(nominal_id)
        if not self.reserve(name, nominal_id):
            return False
        self.queue.append(nominal_id)
        self._types[nominal_id] = (t, name)
        self._order.append(nominal_id)
        logger.debug("Discovered composite type %s as %s", nominal_id, name)
        return True

    def synthesized(self, identity: str) -> str | None:
        """Return the name of a synthesized message, if already registered."""
        return self._synthesized.get(identity)

    def add_synthesized(self, identity: str, message: MessageDescriptor) -> str:
        """Register a synthesized entry or wrapper message.

        Returns the name to reference, which is the existing message's name
        when the same identity was registered before.
        """
        existing = self._synthesized.get(identity)
        if existing is not None:
            return existing
        self._synthesized[identity] = message.name
        if self.reserve(message.name, identity):
            self._order.append(identity)
            self._messages[identity] = message
            logger.debug("Synthesized message %s for %s", message.name, identity)
        return message.name

    def drain(self, member_lookup: MemberLookup, build_fields: FieldBuilder) -> None:
        """Expand queued composite types until the queue is empty.

        Building fields may classify further composite types, which are
        appended to the queue and expanded by this same loop.
        """
        while self.queue:
            nominal_id = self.queue.popleft()
            t, name = self._types[nominal_id]
            members = member_lookup(t)
            if not members:
                logger.warning("Composite type %s has no members", nominal_id)
            fields = build_fields(members, t.base_name)
            self._messages[nominal_id] = MessageDescriptor(
                name=name,
                fields=fields,
                provenance=Provenance.NESTED_COMPOSITE,
                comment=f"Message for {nominal_id}",
            )

    @property
    def messages(self) -> list[MessageDescriptor]:
        """Registered messages in discovery order."""
        return [self._messages[identity] for identity in self._order if identity in self._messages]
