"""
Graph runner — thin sugar over nodnod.

Nodes declare their inputs as ``__compose__`` parameters; nodnod works out
the order and runs independent nodes concurrently.

    @node
    class SettingsNode:
        @classmethod
        async def __compose__(cls, ctx: CheckoutContext) -> "SettingsNode":
            ...

    result = await compose(PricingNode, request, ctx)
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, cast

from nodnod import EventLoopAgent, Node, Scope, Value
from nodnod import scalar_node as node

from orderflow._errors import OrderflowError


def _first_domain_error(group: BaseExceptionGroup[Any]) -> OrderflowError | None:
    for exc in group.exceptions:
        if isinstance(exc, OrderflowError):
            return exc
        if isinstance(exc, BaseExceptionGroup):
            found = _first_domain_error(exc)
            if found is not None:
                return found
    return None


async def compose[T](target: type[T], *inputs: object) -> T:
    """
    Run ``target`` and everything it depends on. Inputs inject by runtime type.

    Raises the node's ``OrderflowError``, also when concurrent branches
    failed together.
    """
    agent = EventLoopAgent.build({cast(type[Node[Any, Any]], target)})

    scope = Scope(detail="checkout")
    async with scope:
        for value in inputs:
            scope.push(Value(cast(type[Any], type(value)), value))

        run_method = cast(
            Callable[[Scope, dict[type[Any], Scope]], Coroutine[Any, Any, None]],
            getattr(agent, "run"),
        )
        try:
            await run_method(scope, {})
        except BaseExceptionGroup as group:
            error = _first_domain_error(group)
            if error is None:
                raise
            raise error from group

        result = scope.get(target)
        if result is None:
            raise KeyError(f"{target.__name__} not found in scope")
        return cast(T, result.value)


__all__ = ("node", "compose")
