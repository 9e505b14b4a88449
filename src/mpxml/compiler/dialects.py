"""Built-in mini-program dialect presets."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mpxml.compiler.events import (
    EventFormatter,
    format_alipay_event,
    format_mini_program_event,
)
from mpxml.compiler.exceptions import UnknownDialectError
from mpxml.compiler.options import (
    CompilerOptions,
    ComponentOptions,
    EventOptions,
    LazyBinding,
    LazyElementTable,
    SlotOptions,
)

# Attribute toggled by custom components for v-show
COMPONENT_CUSTOM_HIDDEN = "data-c-h"


@dataclass
class Dialect:
    name: str
    title: str
    directive: str
    extension: str
    event_format: EventFormatter = format_mini_program_event
    component: ComponentOptions = field(default_factory=ComponentOptions)
    slot: SlotOptions = field(default_factory=SlotOptions)
    lazy_element: Optional[LazyElementTable] = None

    def template_filename(self, stem: str) -> str:
        return f"{stem}.{self.extension}"

    def options(self, **overrides: Any) -> CompilerOptions:
        """Build `CompilerOptions` for this dialect; keyword overrides win."""
        values: Dict[str, Any] = {
            "directive": self.directive,
            "event": EventOptions(format=self.event_format),
            "component": dataclasses.replace(self.component),
            "slot": dataclasses.replace(self.slot),
            "lazy_element": self.lazy_element,
        }
        values.update(overrides)
        return CompilerOptions(**values)


WEIXIN_LAZY_ELEMENT: LazyElementTable = {
    "canvas": [LazyBinding("bind", ["canvas-id", "id"])],
    "editor": [LazyBinding("on", ["ready"])],
    "scroll-view": [LazyBinding("on", ["dragstart", "dragging", "dragend"])],
    "map": [LazyBinding("on", ["markertap", "labeltap", "regionchange"])],
    "textarea": [LazyBinding("on", ["input"])],
}

DIALECTS: Dict[str, Dialect] = {}


def register_dialect(dialect: Dialect) -> Dialect:
    DIALECTS[dialect.name] = dialect
    return dialect


def get_dialect(name: str) -> Dialect:
    try:
        return DIALECTS[name]
    except KeyError:
        raise UnknownDialectError(name, available_dialects()) from None


def available_dialects() -> List[str]:
    return sorted(DIALECTS)


register_dialect(
    Dialect(
        name="weixin",
        title="WeChat",
        directive="wx:",
        extension="wxml",
        component=ComponentOptions(
            v_show=COMPONENT_CUSTOM_HIDDEN, merge_virtual_host_attributes=True
        ),
        lazy_element=WEIXIN_LAZY_ELEMENT,
    )
)
register_dialect(
    Dialect(
        name="qq",
        title="QQ",
        directive="qq:",
        extension="qml",
        component=ComponentOptions(v_show=COMPONENT_CUSTOM_HIDDEN),
        lazy_element=WEIXIN_LAZY_ELEMENT,
    )
)
register_dialect(
    Dialect(
        name="alipay",
        title="Alipay",
        directive="a:",
        extension="axml",
        event_format=format_alipay_event,
        component=ComponentOptions(
            v_show=COMPONENT_CUSTOM_HIDDEN, get_property_sync=True
        ),
        slot=SlotOptions(fallback_content=True),
    )
)
register_dialect(
    Dialect(
        name="baidu",
        title="Baidu",
        directive="s-",
        extension="swan",
        component=ComponentOptions(v_show=COMPONENT_CUSTOM_HIDDEN),
        slot=SlotOptions(fallback_content=True),
        lazy_element={"editor": [LazyBinding("on", ["ready"])]},
    )
)
register_dialect(
    Dialect(
        name="toutiao",
        title="ByteDance",
        directive="tt:",
        extension="ttml",
        component=ComponentOptions(v_show=COMPONENT_CUSTOM_HIDDEN),
    )
)
register_dialect(
    Dialect(
        name="lark",
        title="Lark",
        directive="tt:",
        extension="ttml",
        component=ComponentOptions(v_show=COMPONENT_CUSTOM_HIDDEN),
    )
)
register_dialect(
    Dialect(
        name="kuaishou",
        title="Kuaishou",
        directive="ks:",
        extension="ksml",
        component=ComponentOptions(v_show=COMPONENT_CUSTOM_HIDDEN),
    )
)
register_dialect(
    Dialect(
        name="jd",
        title="JD",
        directive="jd:",
        extension="jxml",
        component=ComponentOptions(v_show=COMPONENT_CUSTOM_HIDDEN),
    )
)
