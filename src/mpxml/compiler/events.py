"""Event attribute name formatters.

A formatter receives the event name and three flags and returns the
attribute name to bind the handler to, e.g. `bindtap` or `catchTap`.
"""

from typing import Callable

EventFormatter = Callable[..., str]

# Alipay spells multi-word events in camel case
ALIPAY_EVENT_MAP = {
    "touchstart": "touchStart",
    "touchmove": "touchMove",
    "touchend": "touchEnd",
    "touchcancel": "touchCancel",
    "longtap": "longTap",
    "longpress": "longTap",
    "transitionend": "transitionEnd",
    "animationstart": "animationStart",
    "animationiteration": "animationIteration",
    "animationend": "animationEnd",
    "firstappear": "firstAppear",
}


def _is_simple_event_name(name: str) -> bool:
    return not (name.startswith("_") or "-" in name or ":" in name)


def format_mini_program_event(
    event_name: str,
    is_catch: bool = False,
    is_capture: bool = False,
    is_component: bool = False,
) -> str:
    """Default formatter: bindtap, catchtap, capture-bind:tap, bind:my-event."""
    if not is_component and event_name == "click":
        event_name = "tap"
    event_type = "catch" if is_catch else "bind"
    if is_capture:
        return f"capture-{event_type}:{event_name}"
    separator = "" if _is_simple_event_name(event_name) else ":"
    return event_type + separator + event_name


def camelize(name: str) -> str:
    head, *rest = name.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def format_alipay_event(
    event_name: str,
    is_catch: bool = False,
    is_capture: bool = False,
    is_component: bool = False,
) -> str:
    """Alipay formatter: onTap, catchTap, onTouchStart, onMyEvent.

    Alipay has no capture phase, the flag is ignored.
    """
    if not is_component and event_name == "click":
        event_name = "tap"
    event_name = camelize(ALIPAY_EVENT_MAP.get(event_name, event_name))
    prefix = "catch" if is_catch else "on"
    return prefix + event_name[:1].upper() + event_name[1:]
