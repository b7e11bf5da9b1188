# tripcheck/services/events.py
import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, List, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict

from tripcheck.core.logger import logger
from tripcheck.models.trips import TripAnalysisRecord


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class TripSaved(Event):
    """
    Published after a trip analysis was stored by the persistence collaborator.
    """
    record: TripAnalysisRecord


E = TypeVar("E", bound=Event)
Handler = Callable[[Any], Union[None, Awaitable[None]]]


class EventBus:
    """
    Typed publish/subscribe channel.

    Handlers are keyed by event class and run in registration order. A handler
    may be a plain function or a coroutine function. A failing handler is
    logged and does not prevent the others from running.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[Event], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[E], handler: Callable[[E], Any]) -> Callable[[], None]:
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers[event_type]
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    async def publish(self, event: Event) -> None:
        for handler in list(self._handlers[type(event)]):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Handler {!r} failed for {}", handler, type(event).__name__)
