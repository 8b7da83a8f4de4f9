"""Ordered fallback chains.

A chain is a list of named strategies tried in order until one succeeds.
A strategy fails by raising JiraImportError; anything else propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import JiraImportError

logger: logging.Logger = logging.getLogger(__name__)

ArgT = TypeVar("ArgT")
ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class Strategy(Generic[ArgT, ResultT]):
    """A named step of a fallback chain."""

    name: str
    run: Callable[[ArgT], ResultT]


@dataclass(frozen=True)
class ChainOutcome(Generic[ResultT]):
    """Result of running a chain."""

    succeeded: bool
    strategy_name: str | None = None
    value: ResultT | None = None
    attempted: tuple[str, ...] = ()


def run_chain(
    strategies: Sequence[Strategy[ArgT, ResultT]],
    argument: ArgT,
    *,
    subject: str,
    pause: Callable[[], None] | None = None,
) -> ChainOutcome[ResultT]:
    """Run strategies in order, stopping at the first one that does not raise.

    Args:
        strategies: Strategies in priority order
        argument: Passed unchanged to every strategy
        subject: Description of what is attempted, for log messages
        pause: Called after each failed attempt, before the next one

    Returns:
        ChainOutcome naming the successful strategy, or succeeded=False when
        every strategy failed
    """
    attempted: list[str] = []
    for strategy in strategies:
        attempted.append(strategy.name)
        logger.debug(f"Trying {strategy.name} for {subject}")
        try:
            value = strategy.run(argument)
        except JiraImportError as e:
            logger.info(f"{strategy.name} failed for {subject}: {e}")
            if pause is not None:
                pause()
            continue
        logger.debug(f"{strategy.name} succeeded for {subject}")
        return ChainOutcome(succeeded=True, strategy_name=strategy.name, value=value, attempted=tuple(attempted))

    return ChainOutcome(succeeded=False, attempted=tuple(attempted))
