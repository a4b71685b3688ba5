"""Base Command class for the CQRS pattern.

Command - a request to change system state (write operation).
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Command(ABC):
    """Base class for all commands.

    Command characteristics:
    - **Immutable**: frozen=True prevents changes
    - **Intent**: clearly states what should happen (AcceptTradeCommand)
    - **Explicit caller**: every command carries the acting user's ID
    - **No business logic**: data only, logic lives in the handler

    Example:
        >>> @dataclass(frozen=True)
        ... class AcceptTradeCommand(Command):
        ...     trade_id: int
        ...     user_id: int

        >>> command = AcceptTradeCommand(trade_id=42, user_id=7)
        >>> trade_dto = await handler.handle(command)
    """

    pass
