"""Render events and the dispatcher that publishes them."""

from collections import defaultdict
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Type,
    runtime_checkable,
)

if TYPE_CHECKING:
    from formwire.widgets.field import ActiveField


@runtime_checkable
class EventDispatcher(Protocol):
    def dispatch(self, event: Any) -> Any: ...


@dataclass
class FieldRenderEvent:
    field: "ActiveField"


class BeforeFieldRender(FieldRenderEvent):
    """Published right before a field builds its markup."""


class AfterFieldRender(FieldRenderEvent):
    """Published right after a field has built its markup."""


Listener = Callable[[Any], None]


class Dispatcher:
    """Synchronous listener registry keyed by event type.

    Listeners registered for a base class also receive its subclasses, so
    listening to ``FieldRenderEvent`` observes both render phases.
    """

    def __init__(self) -> None:
        self._listeners: Dict[type, List[Listener]] = defaultdict(list)

    def listen(
        self, event_type: Type[Any], listener: Optional[Listener] = None
    ) -> Any:
        """Register a listener. Usable directly or as a decorator.

        Usage:
            @dispatcher.listen(BeforeFieldRender)
            def add_hint(event):
                event.field.hint("Required")
        """
        if listener is None:

            def decorator(fn: Listener) -> Listener:
                self._listeners[event_type].append(fn)
                return fn

            return decorator

        self._listeners[event_type].append(listener)
        return listener

    def remove(self, event_type: Type[Any], listener: Listener) -> None:
        if listener in self._listeners.get(event_type, []):
            self._listeners[event_type].remove(listener)

    def dispatch(self, event: Any) -> Any:
        for cls in type(event).__mro__:
            for listener in list(self._listeners.get(cls, ())):
                listener(event)
        return event
