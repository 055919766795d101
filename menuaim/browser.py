"""
zendriver (CDP) implementation of ``MenuEnvironment``.

Listeners injected into the page forward DOM events to Python through a
``Runtime.addBinding`` binding; layout is measured once per menu when it is
registered. One environment serves every menu on a page.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Set, Tuple
import asyncio
import json
import logging
from zendriver import cdp

from .binding import bind
from .config import MenuAimOptions, cfg
from .environment import (
    CLICK,
    DOCUMENT,
    DomEvent,
    EventHandler,
    MenuEnvironment,
)
from .geometry import Region, region_from_rect
from .scheduler import Scheduler
from .telemetry import AimRecorder
from .tracker import PointerTracker


class MenuNotFound(RuntimeError):
    """Raised when the menu selector matches no element on the page."""

    pass


@dataclass(frozen=True)
class ElementRef:
    """A menu root (``index is None``) or one of its items, as seen from Python."""

    menu_id: int
    index: Optional[int] = None


@dataclass(frozen=True)
class ClickTarget:
    """Target of a document click: the ids of the menus containing it."""

    menu_ids: FrozenSet[int]


_INSTALL_JS = """
(() => {
  const name = %(name)s;
  const store = (window.__menuAim = window.__menuAim || {});
  if (store[name]) return true;
  const send = (payload) => {
    if (typeof window[name] === 'function') window[name](JSON.stringify(payload));
  };
  const reg = {menus: {}, nextId: 0, send, listeners: []};
  const listen = (type, fn) => { window.addEventListener(type, fn); reg.listeners.push([type, fn]); };
  listen('mousemove', (e) => send({type: 'mousemove', x: e.pageX, y: e.pageY}));
  listen('click', (e) => send({
    type: 'click', x: e.pageX, y: e.pageY,
    inside: Object.keys(reg.menus).filter((id) => reg.menus[id].root.contains(e.target)).map(Number)
  }));
  store[name] = reg;
  return true;
})()
"""

_REGISTER_MENU_JS = """
(() => {
  const reg = window.__menuAim && window.__menuAim[%(name)s];
  if (!reg) return null;
  const root = document.querySelector(%(menu)s);
  if (!root) return null;
  const id = reg.nextId++;
  const items = Array.from(root.querySelectorAll(%(items)s));
  const listeners = [];
  const listen = (el, type, fn) => { el.addEventListener(type, fn); listeners.push([el, type, fn]); };
  items.forEach((item, index) => {
    listen(item, 'click', (e) => reg.send({type: 'click', menu: id, item: index, x: e.pageX, y: e.pageY}));
    listen(item, 'mouseenter', (e) => reg.send({type: 'mouseenter', menu: id, item: index, x: e.pageX, y: e.pageY}));
  });
  listen(root, 'mouseleave', (e) => reg.send({type: 'mouseleave', menu: id, x: e.pageX, y: e.pageY}));
  reg.menus[id] = {root, items, listeners};
  const rect = root.getBoundingClientRect();
  const style = window.getComputedStyle(root);
  const px = (prop) => parseFloat(style.getPropertyValue(prop)) || 0;
  const top = rect.top + (window.pageYOffset || document.documentElement.scrollTop);
  const left = rect.left + (window.pageXOffset || document.documentElement.scrollLeft);
  return {id, items: items.length, region: {
    top, left,
    right: left + root.clientWidth - px('padding-left') - px('padding-right'),
    bottom: top + root.clientHeight - px('padding-top') - px('padding-bottom')
  }};
})()
"""

_FORGET_MENU_JS = """
(() => {
  const reg = window.__menuAim && window.__menuAim[%(name)s];
  const menu = reg && reg.menus[%(menu_id)s];
  if (!menu) return false;
  menu.listeners.forEach(([el, type, fn]) => el.removeEventListener(type, fn));
  delete reg.menus[%(menu_id)s];
  return true;
})()
"""

_UNINSTALL_JS = """
(() => {
  const store = window.__menuAim;
  const reg = store && store[%(name)s];
  if (!reg) return false;
  Object.values(reg.menus).forEach((menu) =>
    menu.listeners.forEach(([el, type, fn]) => el.removeEventListener(type, fn)));
  reg.listeners.forEach(([type, fn]) => window.removeEventListener(type, fn));
  delete store[%(name)s];
  return true;
})()
"""

_CLASS_LIST_JS = """
(() => {
  const reg = window.__menuAim && window.__menuAim[%(name)s];
  const menu = reg && reg.menus[%(menu_id)s];
  if (!menu) return false;
  const el = %(index)s === null ? menu.root : menu.items[%(index)s];
  if (!el) return false;
  el.classList.%(method)s(%(class_name)s);
  return true;
})()
"""


def _remote_value(response: Any) -> Any:
    """Extract the by-value result of a ``Runtime.evaluate`` response."""
    remote = response
    if isinstance(response, tuple):
        remote = response[0] if response else None
        exception = response[1] if len(response) > 1 else None
        if exception is not None:
            text = getattr(exception, "text", None) or repr(exception)
            raise RuntimeError(f"Page script failed: {text}")
    if isinstance(remote, dict):
        remote = remote.get("result", remote)
        return remote.get("value") if isinstance(remote, dict) else remote
    return getattr(remote, "value", None)


class ZendriverEnvironment(MenuEnvironment):
    """Page-scoped environment backed by a zendriver tab."""

    def __init__(self, page, *, binding_name: str = cfg.CDP_BINDING_NAME):
        self.page = page
        self.binding_name = binding_name
        self._attached = False
        self._handlers: Dict[Tuple[Any, str], List[EventHandler]] = {}
        self._regions: Dict[int, Region] = {}
        self._roots: Dict[int, ElementRef] = {}
        self._items: Dict[int, List[ElementRef]] = {}
        self._tasks: Set[asyncio.Task] = set()
        # menu id -> unbind function of the binding made by bind_page()
        self._bindings: Dict[int, Callable[[], None]] = {}

    # --- CDP plumbing ---
    async def _evaluate(self, expression: str) -> Any:
        response = await asyncio.wait_for(
            self.page.send(
                cdp.runtime.evaluate(
                    expression=expression,
                    return_by_value=True,
                    await_promise=False,
                )
            ),
            timeout=cfg.CDP_SEND_TIMEOUT_S,
        )
        return _remote_value(response)

    def _spawn(self, coro: Awaitable[Any], *, label: str) -> None:
        """Run ``coro`` in the background, logging (not raising) failures."""
        logger = logging.getLogger(__name__)

        async def _guarded() -> None:
            try:
                await coro
            except Exception:
                logger.warning("CDP %s failed (skipped)", label, exc_info=True)

        task = asyncio.ensure_future(_guarded())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for pending background CDP sends."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # --- Lifecycle ---
    async def attach(self) -> None:
        """Register the runtime binding and the document-wide listeners."""
        if self._attached:
            return
        await self.page.send(cdp.runtime.add_binding(name=self.binding_name))
        self.page.add_handler(cdp.runtime.BindingCalled, self._on_binding_called)
        await self._evaluate(_INSTALL_JS % {"name": json.dumps(self.binding_name)})
        self._attached = True
        logging.getLogger(__name__).info(
            "Menu aim environment attached (binding %s)", self.binding_name
        )

    async def register_menu(
        self, menu_selector: str, item_selector: str = cfg.ITEM_SELECTOR
    ) -> ElementRef:
        """Inject listeners for one menu and measure its content region."""
        await self.attach()
        result = await self._evaluate(
            _REGISTER_MENU_JS
            % {
                "name": json.dumps(self.binding_name),
                "menu": json.dumps(menu_selector),
                "items": json.dumps(item_selector),
            }
        )
        if not result:
            raise MenuNotFound(f"Menu not found for selector: {menu_selector!r}")

        menu_id = int(result["id"])
        root = ElementRef(menu_id)
        self._roots[menu_id] = root
        self._items[menu_id] = [ElementRef(menu_id, i) for i in range(int(result["items"]))]
        self._regions[menu_id] = region_from_rect(result["region"])
        logging.getLogger(__name__).debug(
            "Registered menu %s (%r): %d item(s), region %s",
            menu_id,
            menu_selector,
            len(self._items[menu_id]),
            self._regions[menu_id],
        )
        return root

    def track_binding(self, root: ElementRef, unbind: Callable[[], None]) -> None:
        """Remember the unbind function of the binding on ``root``; ``detach`` calls it."""
        self._bindings[root.menu_id] = unbind

    def forget_menu(self, root: ElementRef) -> None:
        """Drop a registered menu and remove its page listeners in the background."""
        # menu ids restart after detach(); a stale root must not drop its successor
        if self._roots.get(root.menu_id) is not root:
            return
        del self._roots[root.menu_id]
        self._bindings.pop(root.menu_id, None)
        self._items.pop(root.menu_id, None)
        self._regions.pop(root.menu_id, None)
        self._spawn(
            self._evaluate(
                _FORGET_MENU_JS
                % {"name": json.dumps(self.binding_name), "menu_id": root.menu_id}
            ),
            label="forget_menu",
        )

    async def detach(self) -> None:
        """Unbind the menus bound through this environment, then remove the
        injected listeners and the runtime binding."""
        if not self._attached:
            return
        self._attached = False
        for unbind in list(self._bindings.values()):
            unbind()
        self._bindings.clear()
        await self.drain()
        self.page.remove_handlers(cdp.runtime.BindingCalled, self._on_binding_called)
        await self._evaluate(_UNINSTALL_JS % {"name": json.dumps(self.binding_name)})
        await self.page.send(cdp.runtime.remove_binding(name=self.binding_name))
        self._handlers.clear()
        self._roots.clear()
        self._items.clear()
        self._regions.clear()
        logging.getLogger(__name__).info("Menu aim environment detached")

    # --- Event routing ---
    def _on_binding_called(self, event: Any) -> None:
        if getattr(event, "name", None) != self.binding_name:
            return
        try:
            payload = json.loads(event.payload)
        except (TypeError, ValueError):
            logging.getLogger(__name__).warning(
                "Ignoring malformed menu aim payload: %r", getattr(event, "payload", None)
            )
            return
        self.dispatch_payload(payload)

    def _resolve_target(self, payload: Dict[str, Any]) -> Any:
        if payload.get("menu") is None:
            return DOCUMENT
        menu_id = int(payload["menu"])
        if payload.get("item") is None:
            return self._roots.get(menu_id)
        items = self._items.get(menu_id, [])
        index = int(payload["item"])
        return items[index] if 0 <= index < len(items) else None

    def dispatch_payload(self, payload: Dict[str, Any]) -> None:
        """Route one forwarded DOM event to the handlers subscribed to it."""
        if not isinstance(payload, dict) or "type" not in payload:
            raise ValueError(f"Malformed menu aim payload: {payload!r}")
        event_type = payload["type"]
        target = self._resolve_target(payload)
        if target is None:
            return

        event_target = target
        if target is DOCUMENT and event_type == CLICK:
            event_target = ClickTarget(frozenset(int(i) for i in payload.get("inside") or ()))
        event = DomEvent(event_type, event_target, payload.get("x"), payload.get("y"))
        for handler in list(self._handlers.get((target, event_type), ())):
            handler(event)

    # --- MenuEnvironment ---
    def content_region(self, element: ElementRef) -> Region:
        return self._regions[element.menu_id]

    def select_items(self, root: ElementRef, selector: str) -> List[ElementRef]:
        # items were enumerated by register_menu()
        return list(self._items.get(root.menu_id, []))

    def contains(self, root: ElementRef, target: Any) -> bool:
        if isinstance(target, ClickTarget):
            return root.menu_id in target.menu_ids
        if isinstance(target, ElementRef):
            return target.menu_id == root.menu_id
        return False

    def subscribe(self, target: Any, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault((target, event_type), []).append(handler)

    def unsubscribe(self, target: Any, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get((target, event_type))
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._handlers[(target, event_type)]

    def _class_list(self, element: ElementRef, method: str, class_name: str) -> None:
        expression = _CLASS_LIST_JS % {
            "name": json.dumps(self.binding_name),
            "menu_id": element.menu_id,
            "index": "null" if element.index is None else element.index,
            "method": method,
            "class_name": json.dumps(class_name),
        }
        self._spawn(self._evaluate(expression), label=f"classList.{method}")

    def add_class(self, element: ElementRef, class_name: str) -> None:
        self._class_list(element, "add", class_name)

    def remove_class(self, element: ElementRef, class_name: str) -> None:
        self._class_list(element, "remove", class_name)


async def get_environment(page) -> ZendriverEnvironment:
    """Return the page's attached environment, creating it on first use."""
    environment = getattr(page, "_menu_aim_environment", None)
    if environment is None:
        environment = ZendriverEnvironment(page)
        setattr(page, "_menu_aim_environment", environment)
    await environment.attach()
    return environment


async def bind_page(
    page,
    menu_selector: str,
    options: Optional[dict] = None,
    *,
    tracker: Optional[PointerTracker] = None,
    scheduler: Optional[Scheduler] = None,
    recorder: Optional[AimRecorder] = None,
    **kwargs: Any,
):
    """Bind menu aim to the menu matching ``menu_selector`` on a zendriver tab.

    Returns an unbind function; it also removes the menu's page listeners.
    """
    environment = await get_environment(page)
    item_selector = MenuAimOptions.from_options(options, **kwargs).item_selector
    root = await environment.register_menu(menu_selector, item_selector)
    unbind_menu = bind(
        root,
        environment,
        options,
        tracker=tracker,
        scheduler=scheduler,
        recorder=recorder,
        **kwargs,
    )

    def unbind() -> None:
        unbind_menu()
        environment.forget_menu(root)

    unbind.menu_aim = unbind_menu.menu_aim  # type: ignore[attr-defined]
    environment.track_binding(root, unbind)
    return unbind
