"""Compiler configuration bundle."""

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Union,
)

from mpxml.compiler.ast_nodes import ElementNode, Expression
from mpxml.compiler.events import EventFormatter
from mpxml.compiler.expressions import gen_expr

if TYPE_CHECKING:
    from mpxml.compiler.codegen.template import TemplateCodegenContext


# Framework-level components rendered by the runtime, never as custom components
BUILT_IN_COMPONENTS = {
    "teleport",
    "suspense",
    "keep-alive",
    "transition",
    "transition-group",
    "Teleport",
    "Suspense",
    "KeepAlive",
    "Transition",
    "TransitionGroup",
}


def is_built_in_component(tag: str) -> bool:
    return tag in BUILT_IN_COMPONENTS


@dataclass
class LazyBinding:
    """Bindings that make an element lazy: directive name plus argument names.

    `LazyBinding("on", ["ready"])` matches `@ready`,
    `LazyBinding("bind", ["canvas-id"])` matches `:canvas-id`.
    """

    name: str  # 'on' | 'bind'
    arg: List[str] = field(default_factory=list)


LazyElementTable = Dict[str, Union[bool, List[LazyBinding]]]
LazyElementResolver = Callable[
    [ElementNode, "TemplateCodegenContext"], Union[bool, LazyElementTable, None]
]
LazyElement = Union[LazyElementTable, LazyElementResolver]


@dataclass
class EventOptions:
    format: Optional[EventFormatter] = None


@dataclass
class SlotOptions:
    # Dialect renders <slot> fallback children itself
    fallback_content: bool = False


@dataclass
class ComponentOptions:
    get_property_sync: bool = False
    merge_virtual_host_attributes: bool = False
    # Attribute used for v-show on custom components (default: hidden)
    v_show: Optional[str] = None
    normalize_name: Optional[Callable[[str], str]] = None


@dataclass
class CompilerOptions:
    """Everything one `generate` call needs besides the AST."""

    directive: str = "wx:"
    filename: str = ""
    scope_id: Optional[str] = None
    event: EventOptions = field(default_factory=EventOptions)
    slot: SlotOptions = field(default_factory=SlotOptions)
    component: Optional[ComponentOptions] = None
    lazy_element: Optional[LazyElement] = None
    is_built_in_component: Callable[[str], bool] = is_built_in_component
    is_mini_program_component: Callable[[str], bool] = lambda tag: False
    emit_file: Optional[Callable[[Dict[str, Any]], None]] = None
    gen_expr: Callable[[Expression], str] = gen_expr
