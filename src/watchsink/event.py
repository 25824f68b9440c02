"""Events handed to notification sinks by the watch pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Kinds that are not namespaced; their messages omit the namespace.
CLUSTER_SCOPED_KINDS = frozenset(
    {
        "namespace",
        "node",
        "cluster role",
        "cluster role binding",
        "persistent volume",
    }
)


class EventStatus(str, Enum):
    """Severity attached to an event by the watch pipeline."""

    NORMAL = "Normal"
    WARNING = "Warning"
    DANGER = "Danger"


class DomainEvent(BaseModel):
    """A watched resource change.

    Produced by the event pipeline; sinks only read it.

    Attributes:
        kind: Resource kind (e.g. "Pod", "namespace")
        name: Resource name
        namespace: Resource namespace, empty for cluster-scoped kinds
        reason: What happened (e.g. "Created", "Deleted", "Updated")
        status: Severity of the event
    """

    model_config = ConfigDict(frozen=True)

    kind: str = Field(default="")
    name: str = Field(default="")
    namespace: str = Field(default="")
    reason: str = Field(default="")
    status: EventStatus = Field(default=EventStatus.NORMAL)

    def message(self) -> str:
        """Return the human-readable description sent as notification text."""
        if self.kind.lower() in CLUSTER_SCOPED_KINDS:
            return f"A `{self.kind}` `{self.name}` has been `{self.reason}`"
        return (
            f"A `{self.kind}` in namespace `{self.namespace}` has been "
            f"`{self.reason}`:\n`{self.name}`"
        )
