"""
Endorsement policy expression tree.

An expression is a small boolean/threshold algebra over named principals:

- And(children): every child must be satisfied
- Or(children): at least one child must be satisfied
- AtLeast(children, threshold): at least `threshold` children must be satisfied
- Principal(msp_id, role): an organization that must endorse in a given role

Nodes are immutable pydantic models. Equality and hashing ignore child order,
so `And([a, b]) == And([b, a])`.

Example:
    >>> org1 = Principal("ORG1", Role.PEER)
    >>> either = Or([Principal("ORG3", Role.PEER), Principal("ORG4", Role.PEER)])
    >>> policy = And([org1, either])
    >>> policy == And([either, org1])
    True
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from endorsement_policy.domain.enums import Role


class PolicyNode(BaseModel):
    """Common base for all expression nodes."""

    model_config = ConfigDict(frozen=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PolicyNode):
            return NotImplemented
        from endorsement_policy.codec.equivalence import equivalent

        return equivalent(self, other)

    def __hash__(self) -> int:
        from endorsement_policy.codec.equivalence import canonical_key

        return hash(canonical_key(self))


class Combinator(PolicyNode):
    """A node aggregating child expressions."""

    children: tuple[Expression, ...] = ()

    def __init__(self, children: Iterable[Any] | None = None, /, **data: Any) -> None:
        if children is not None:
            data["children"] = tuple(children)
        super().__init__(**data)


class And(Combinator):
    """Satisfied when all children are satisfied."""

    kind: Literal["AND"] = "AND"


class Or(Combinator):
    """Satisfied when at least one child is satisfied."""

    kind: Literal["OR"] = "OR"


class AtLeast(Combinator):
    """
    Satisfied when at least `threshold` children are satisfied.

    The threshold is not range-checked here so that degenerate wire input can
    still be represented; use `validate_expression` before encoding.
    """

    kind: Literal["AT_LEAST"] = "AT_LEAST"
    threshold: int

    def __init__(
        self,
        children: Iterable[Any] | None = None,
        threshold: int | None = None,
        /,
        **data: Any,
    ) -> None:
        if threshold is not None:
            data["threshold"] = threshold
        super().__init__(children, **data)


class Principal(PolicyNode):
    """Leaf naming an MSP identity and the role it must hold."""

    kind: Literal["PRINCIPAL"] = "PRINCIPAL"
    msp_id: str
    role: Role

    def __init__(
        self, msp_id: str | None = None, role: Role | str | None = None, /, **data: Any
    ) -> None:
        if msp_id is not None:
            data["msp_id"] = msp_id
        if role is not None:
            data["role"] = role
        super().__init__(**data)


Expression = Annotated[And | Or | AtLeast | Principal, Field(discriminator="kind")]

for _model in (Combinator, And, Or, AtLeast):
    _model.model_rebuild()

expression_adapter: TypeAdapter[Expression] = TypeAdapter(Expression)
