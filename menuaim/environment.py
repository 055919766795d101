"""
Environment contract for menu aim bindings.

The binding never touches a DOM directly. Everything it needs from the page
(layout, item lookup, event subscriptions, class markers) goes through a
``MenuEnvironment`` implementation.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .geometry import Region

# --- Event types ---
CLICK = "click"
MOUSE_ENTER = "mouseenter"
MOUSE_LEAVE = "mouseleave"
POINTER_MOVE = "mousemove"


class _Document:
    """Sentinel target for document-wide subscriptions."""

    def __repr__(self) -> str:
        return "DOCUMENT"


DOCUMENT = _Document()


@dataclass(frozen=True)
class DomEvent:
    """An event delivered by the environment. ``x``/``y`` are page coordinates."""

    type: str
    target: Any = None
    x: Optional[float] = None
    y: Optional[float] = None


EventHandler = Callable[[DomEvent], None]


class MenuEnvironment(ABC):
    """
    Abstract protocol for the page hosting a menu.
    """

    # --- LAYOUT ---
    @abstractmethod
    def content_region(self, element: Any) -> Region:
        """Content box of ``element`` in page coordinates, net of padding."""

    @abstractmethod
    def select_items(self, root: Any, selector: str) -> Sequence[Any]:
        """Elements inside ``root`` matching ``selector``, in document order."""

    @abstractmethod
    def contains(self, root: Any, target: Any) -> bool:
        """True if ``target`` is ``root`` or one of its descendants."""

    # --- EVENTS ---
    @abstractmethod
    def subscribe(self, target: Any, event_type: str, handler: EventHandler) -> None: pass
    @abstractmethod
    def unsubscribe(self, target: Any, event_type: str, handler: EventHandler) -> None: pass

    # --- MARKERS ---
    @abstractmethod
    def add_class(self, element: Any, class_name: str) -> None: pass
    @abstractmethod
    def remove_class(self, element: Any, class_name: str) -> None: pass
