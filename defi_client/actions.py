"""
Action and ActionBatch: the ordered list of handler calls that becomes one
proxy transaction.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple

from defi_client.abi_utils import to_checksum
from defi_client.errors import InvalidArgument


@dataclass(frozen=True)
class Approval:
    """Token amount the proxy must be allowed to pull before an action runs"""
    token: str
    amount: int

    def __post_init__(self):
        object.__setattr__(self, 'token', to_checksum(self.token))
        if not isinstance(self.amount, int) or isinstance(self.amount, bool) or self.amount < 0:
            raise InvalidArgument(f"approval amount must be a non-negative int: {self.amount!r}")


@dataclass(frozen=True)
class Action:
    """One encoded handler call plus the resources it needs"""
    target: str
    payload: bytes
    value_required: int = 0
    approvals: Tuple[Approval, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'target', to_checksum(self.target))
        if not isinstance(self.payload, (bytes, bytearray)):
            raise InvalidArgument(f"payload must be bytes, got {type(self.payload).__name__}")
        object.__setattr__(self, 'payload', bytes(self.payload))
        object.__setattr__(self, 'approvals', tuple(self.approvals))
        if (not isinstance(self.value_required, int) or isinstance(self.value_required, bool)
                or self.value_required < 0):
            raise InvalidArgument(f"value_required must be a non-negative int: {self.value_required!r}")


def approvals_from(tokens: Sequence[str], amounts: Sequence[int]) -> Tuple[Approval, ...]:
    """Pair up parallel token/amount lists."""
    if len(tokens) != len(amounts):
        raise InvalidArgument(
            f"approval tokens and amounts differ in length: {len(tokens)} != {len(amounts)}"
        )
    return tuple(Approval(t, a) for t, a in zip(tokens, amounts))


class CombinedBatch(NamedTuple):
    targets: List[str]
    payloads: List[bytes]
    value: int


class ActionBatch:
    """Ordered sequence of actions. Insertion order is execution order."""

    def __init__(self, actions: Iterable[Action] = ()):
        self.actions: List[Action] = []
        for action in actions:
            if not isinstance(action, Action):
                raise InvalidArgument(f"expected Action, got {type(action).__name__}")
            self.actions.append(action)

    @classmethod
    def of(cls, *actions: Action) -> 'ActionBatch':
        return cls(actions)

    def add(self, *batches: 'ActionBatch') -> 'ActionBatch':
        """Append the actions of each batch, in argument order."""
        if not batches:
            raise InvalidArgument("add() needs at least one batch")
        for batch in batches:
            if not isinstance(batch, ActionBatch):
                raise InvalidArgument(f"expected ActionBatch, got {type(batch).__name__}")
        for batch in batches:
            self.actions.extend(batch.actions)
        return self

    def combine(self) -> CombinedBatch:
        targets = [a.target for a in self.actions]
        payloads = [a.payload for a in self.actions]
        return CombinedBatch(targets, payloads, self.total_value())

    def total_value(self) -> int:
        return sum(a.value_required for a in self.actions)

    def approval_requirements(self) -> List[Approval]:
        return [approval for a in self.actions for approval in a.approvals]

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __repr__(self) -> str:
        return f"ActionBatch(actions={len(self.actions)}, value={self.total_value()})"
