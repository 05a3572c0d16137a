from __future__ import annotations
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Sequence, Tuple
from zendriver import cdp

from .errors import ViewportUnavailable
from .keyboard.primitives import emit_character
from .mouse.config import cfg

logger = logging.getLogger(__name__)

LOAD_POLL_INTERVAL_S: float = 0.1
NETWORK_QUIET_S: float = 0.5  # resource count must hold still this long

_INSPECT_JS = """function () {
  const el = this;
  const doc = el.ownerDocument;
  const view = doc && doc.defaultView;
  if (!el.isConnected || !view) { return {attached: false}; }
  const style = view.getComputedStyle(el);
  const rect = el.getBoundingClientRect();
  const root = el.getRootNode();
  const probe = typeof root.elementFromPoint === 'function' ? root : doc;
  const hit = probe.elementFromPoint(rect.left + rect.width / 2, rect.top + rect.height / 2);
  const durations = (style.transitionDuration || '0s').split(',').map(function (v) {
    v = v.trim();
    return v.endsWith('ms') ? parseFloat(v) / 1000 : parseFloat(v);
  }).filter(function (v) { return !isNaN(v); });
  return {
    attached: true,
    display: style.display,
    visibility: style.visibility,
    opacity: parseFloat(style.opacity),
    has_offset_parent: el.offsetParent !== null || style.position === 'fixed',
    disabled: !!el.disabled,
    occluded: hit !== null && hit !== el && !el.contains(hit),
    rect: {x: rect.left, y: rect.top, width: rect.width, height: rect.height},
    transition_s: durations.length ? Math.max.apply(null, durations) : 0
  };
}"""

_RECT_JS = """function () {
  const r = this.getBoundingClientRect();
  return {x: r.left, y: r.top, width: r.width, height: r.height};
}"""

_SCROLL_INTO_VIEW_JS = """function () {
  this.scrollIntoView({behavior: 'smooth', block: 'center'});
  const style = this.ownerDocument.defaultView.getComputedStyle(this);
  const values = (style.transitionDuration || '0s').split(',').map(function (v) {
    v = v.trim();
    return v.endsWith('ms') ? parseFloat(v) / 1000 : parseFloat(v);
  }).filter(function (v) { return !isNaN(v); });
  return values.length ? Math.max.apply(null, values) : 0;
}"""

_DISPATCH_EVENTS_JS = """function (names, x, y) {
  const el = this;
  const view = el.ownerDocument.defaultView;
  const init = {bubbles: true, cancelable: true, composed: true, view: view,
                clientX: x, clientY: y, button: 0};
  names.forEach(function (name) {
    let event;
    if (name.indexOf('pointer') === 0 && typeof view.PointerEvent === 'function') {
      event = new view.PointerEvent(name, Object.assign({pointerType: 'mouse', isPrimary: true}, init));
    } else if (name === 'focus' || name === 'focusin') {
      event = new view.FocusEvent(name, {bubbles: name === 'focusin', composed: true});
    } else {
      const buttons = name === 'mousedown' ? 1 : 0;
      event = new view.MouseEvent(name, Object.assign({buttons: buttons}, init,
        {bubbles: name !== 'mouseenter'}));
    }
    el.dispatchEvent(event);
  });
  return names.length;
}"""

_WAIT_ACTIVE_JS = """function (timeoutMs) {
  const el = this;
  const check = function () {
    return el.matches(':active') || el.matches(':focus') || el.matches(':focus-within');
  };
  return new Promise(function (resolve) {
    if (check()) { resolve(true); return; }
    const started = Date.now();
    const timer = setInterval(function () {
      if (check()) { clearInterval(timer); resolve(true); }
      else if (Date.now() - started >= timeoutMs) { clearInterval(timer); resolve(false); }
    }, 50);
  });
}"""

_FOCUS_JS = """function () {
  this.focus();
  const active = this.getRootNode().activeElement;
  return active === this || (active !== null && this.contains(active));
}"""

_LOAD_STATE_JS = (
    "({state: document.readyState, "
    "resources: performance.getEntriesByType('resource').length})"
)


def _iter_document_scope(node) -> Iterator[Any]:
    """Nodes of one document in document order, shadow trees included.

    Stops at frame boundaries: a frame's content document is not entered.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        following = list(current.shadow_roots or []) + list(current.children or [])
        stack.extend(reversed(following))


def _is_author_shadow_root(shadow_root) -> bool:
    kind = getattr(shadow_root, "shadow_root_type", None)
    return kind is None or kind != cdp.dom.ShadowRootType.USER_AGENT


@dataclass
class _SendState:
    semaphore: asyncio.Semaphore = field(default_factory=lambda: asyncio.Semaphore(1))
    last_send_ts: Optional[float] = None


class ZendriverSession:
    """Remote document primitives over a zendriver tab.

    Documents are CDP ``DOM.Node`` trees fetched with ``pierce=True``;
    elements are ``DOM.NodeId`` values of that snapshot, so a fresh
    ``document()`` must be requested after any navigation.
    """

    def __init__(self, tab):
        self.tab = tab
        self.pointer = None
        self._input = _SendState()

    # ----- input -----

    async def _send_input(self, fn: Callable[[], Awaitable[Any]], *, label: str) -> None:
        """Bounded-time input send with a shielded task so it can't be cancelled mid-flight."""
        state = self._input
        async with state.semaphore:
            now = time.perf_counter()
            if state.last_send_ts is not None:
                gap = now - state.last_send_ts
                if gap < cfg.CDP_SEND_MIN_INTERVAL_S:
                    await asyncio.sleep(cfg.CDP_SEND_MIN_INTERVAL_S - gap)

            send_task = asyncio.ensure_future(fn())
            start = time.perf_counter()
            try:
                await asyncio.wait_for(
                    asyncio.shield(send_task), timeout=cfg.CDP_SEND_TIMEOUT_S
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "CDP %s pending %.1f ms (>%.0f ms); letting it finish in background",
                    label,
                    (time.perf_counter() - start) * 1000.0,
                    cfg.CDP_SEND_TIMEOUT_S * 1000.0,
                )

                def _late_log(task: asyncio.Future) -> None:
                    if not task.cancelled() and task.exception() is not None:
                        logger.warning(
                            "CDP %s failed after timeout: %s", label, task.exception()
                        )

                send_task.add_done_callback(_late_log)
            state.last_send_ts = time.perf_counter()

    async def _mouse_event(self, type_: str, x: float, y: float, **kwargs) -> None:
        await self._send_input(
            lambda: self.tab.send(
                cdp.input_.dispatch_mouse_event(
                    type_=type_, x=float(x), y=float(y), **kwargs
                )
            ),
            label=type_,
        )

    async def move_pointer(self, x: float, y: float) -> None:
        await self._mouse_event("mouseMoved", x, y)

    async def mouse_down(self, x: float, y: float) -> None:
        await self._mouse_event(
            "mousePressed", x, y, button=cdp.input_.MouseButton.LEFT, click_count=1
        )

    async def mouse_up(self, x: float, y: float) -> None:
        await self._mouse_event(
            "mouseReleased", x, y, button=cdp.input_.MouseButton.LEFT, click_count=1
        )

    async def scroll_by(self, delta_y: float) -> None:
        x, y = self.pointer if self.pointer is not None else (0.0, 0.0)
        await self._mouse_event("mouseWheel", x, y, delta_x=0.0, delta_y=float(delta_y))

    async def type_character(self, ch: str) -> None:
        await emit_character(self.tab, ch)

    # ----- page -----

    async def viewport(
        self, *, timeout_seconds: float = 1.5, poll_interval_seconds: float = 0.05
    ) -> Tuple[int, int]:
        """Layout viewport size, falling back to window.inner* while the page boots."""
        start = time.perf_counter()
        last_error: Optional[BaseException] = None
        while (time.perf_counter() - start) < timeout_seconds:
            try:
                metrics = await self.tab.send(cdp.page.get_layout_metrics())
                layout = metrics[3] if len(metrics) > 3 else metrics[0]
                w, h = int(layout.client_width), int(layout.client_height)
                if w > 0 and h > 0:
                    return w, h
            except Exception as exc:
                last_error = exc
            try:
                size = await self.evaluate(
                    "({w: window.innerWidth || 0, h: window.innerHeight || 0})"
                )
                if size and size.get("w", 0) > 0 and size.get("h", 0) > 0:
                    return int(size["w"]), int(size["h"])
            except Exception as exc:
                last_error = exc
            await asyncio.sleep(poll_interval_seconds)
        raise ViewportUnavailable(
            f"Viewport did not become ready within {timeout_seconds:.2f}s"
            + (f" last error: {last_error!r}" if last_error else "")
        )

    async def evaluate(self, expression: str) -> Any:
        """Evaluate an expression in the top-level document and return its value."""
        result, exception = await self.tab.send(
            cdp.runtime.evaluate(
                expression=expression, return_by_value=True, await_promise=True
            )
        )
        if exception is not None:
            raise RuntimeError(f"Evaluation failed: {exception.text}")
        return result.value

    async def reload(self) -> None:
        await self.tab.send(cdp.page.reload())

    async def wait_for_load(self, timeout: float = 30.0) -> bool:
        """Wait for readyState 'complete' and a quiet resource timeline."""
        deadline = time.perf_counter() + timeout
        last_count: Optional[int] = None
        quiet_since: Optional[float] = None
        while time.perf_counter() < deadline:
            try:
                state = await self.evaluate(_LOAD_STATE_JS)
            except Exception as exc:
                logger.debug("Load state probe failed: %s", exc)
                state = None
            now = time.perf_counter()
            if state and state.get("state") == "complete":
                count = int(state.get("resources", 0))
                if count != last_count:
                    last_count, quiet_since = count, now
                elif now - quiet_since >= NETWORK_QUIET_S:
                    return True
            else:
                last_count = quiet_since = None
            await asyncio.sleep(LOAD_POLL_INTERVAL_S)
        logger.warning("Page did not settle within %.1fs after reload", timeout)
        return False

    # ----- documents -----

    async def document(self):
        return await self.tab.send(cdp.dom.get_document(depth=-1, pierce=True))

    async def query_selector_all(self, document, selector: str) -> List[Any]:
        return list(
            await self.tab.send(
                cdp.dom.query_selector_all(node_id=document.node_id, selector=selector)
            )
        )

    async def query_shadow_roots(self, document, selector: str) -> List[Any]:
        matches: List[Any] = []
        for node in _iter_document_scope(document):
            for shadow_root in node.shadow_roots or []:
                if not _is_author_shadow_root(shadow_root):
                    continue
                matches.extend(
                    await self.tab.send(
                        cdp.dom.query_selector_all(
                            node_id=shadow_root.node_id, selector=selector
                        )
                    )
                )
        return matches

    async def child_frames(self, document) -> List[Tuple[Any, Any]]:
        return [
            (node.node_id, node.content_document)
            for node in _iter_document_scope(document)
            if node is not document and node.content_document is not None
        ]

    # ----- elements -----

    async def _call(self, element, function_declaration: str, *args: Any) -> Any:
        remote = await self.tab.send(cdp.dom.resolve_node(node_id=element))
        object_id = remote.object_id
        try:
            result, exception = await self.tab.send(
                cdp.runtime.call_function_on(
                    function_declaration,
                    object_id=object_id,
                    arguments=[cdp.runtime.CallArgument(value=arg) for arg in args],
                    return_by_value=True,
                    await_promise=True,
                )
            )
        finally:
            await self.tab.send(cdp.runtime.release_object(object_id))
        if exception is not None:
            raise RuntimeError(f"Element script failed: {exception.text}")
        return result.value

    async def inspect(self, element) -> Dict[str, Any]:
        return await self._call(element, _INSPECT_JS) or {"attached": False}

    async def bounding_box(self, element) -> Dict[str, float]:
        return await self._call(element, _RECT_JS)

    async def scroll_into_view(self, element) -> float:
        return float(await self._call(element, _SCROLL_INTO_VIEW_JS) or 0.0)

    async def dispatch_events(
        self, element, names: Sequence[str], x: float = 0.0, y: float = 0.0
    ) -> int:
        return int(await self._call(element, _DISPATCH_EVENTS_JS, list(names), x, y))

    async def wait_for_active(self, element, timeout: float) -> bool:
        try:
            return bool(
                await asyncio.wait_for(
                    self._call(element, _WAIT_ACTIVE_JS, int(timeout * 1000)),
                    timeout + 1.0,
                )
            )
        except asyncio.TimeoutError:
            return False

    async def focus(self, element) -> bool:
        return bool(await self._call(element, _FOCUS_JS))
