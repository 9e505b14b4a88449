"""AST node definitions for annotated component templates."""

import enum
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union


class ElementType(str, enum.Enum):
    """Role of an element node, fixed by the upstream transform passes."""

    ELEMENT = "element"
    COMPONENT = "component"
    SLOT = "slot"
    TEMPLATE = "template"


@dataclass
class SimpleExpression:
    """A single expression or identifier.

    Static expressions are literal names (an event name, a handler method
    name, a static directive argument); dynamic ones are bound code.
    """

    content: str
    is_static: bool = False


@dataclass
class CompoundExpression:
    """Expression made of several pieces concatenated in order."""

    children: List[Union["SimpleExpression", "CompoundExpression", str]] = field(
        default_factory=list
    )


Expression = Union[SimpleExpression, CompoundExpression]


@dataclass
class Attribute:
    """Static attribute, e.g. id="main" or a bare `disabled`."""

    name: str
    value: Optional[str] = None
    line: int = 0
    column: int = 0


@dataclass
class Directive:
    """Directive prop such as v-bind, v-on, v-show or v-slot."""

    name: str
    arg: Optional[Expression] = None
    exp: Optional[Expression] = None
    modifiers: List[str] = field(default_factory=list)
    # Resolved by the slot transform for scoped named slot outlets
    slot_name: Optional[str] = None
    line: int = 0
    column: int = 0

    @property
    def raw_name(self) -> str:
        """Source-like spelling, e.g. v-on:tap.stop."""
        raw = f"v-{self.name}"
        if self.arg is not None:
            raw += ":" + expression_content(self.arg)
        for modifier in self.modifiers:
            raw += "." + modifier
        return raw


Prop = Union[Attribute, Directive]


@dataclass
class IfMetadata:
    """Control-flow annotation of a conditional branch."""

    name: str  # 'if' | 'else-if' | 'else'
    condition: Optional[str] = None


@dataclass
class ForMetadata:
    """Repetition annotation: source binding and loop aliases."""

    source: str
    value_alias: Optional[str] = None
    index_alias: Optional[str] = None


@dataclass
class TextNode:
    content: str
    line: int = 0
    column: int = 0


@dataclass
class InterpolationNode:
    content: Expression
    line: int = 0
    column: int = 0


@dataclass
class ElementNode:
    """Markup element; `tag_type` decides which generator owns it."""

    tag: str
    tag_type: ElementType = ElementType.ELEMENT
    props: List[Prop] = field(default_factory=list)
    children: List["TemplateChildNode"] = field(default_factory=list)
    is_self_closing: bool = False
    v_if: Optional[IfMetadata] = None
    v_for: Optional[ForMetadata] = None
    line: int = 0
    column: int = 0


@dataclass
class IfNode:
    """Group of sibling conditional branches (if, else-if..., else)."""

    branches: List[ElementNode] = field(default_factory=list)
    line: int = 0
    column: int = 0


TemplateChildNode = Union[TextNode, InterpolationNode, IfNode, ElementNode]


@dataclass
class RootNode:
    children: List[TemplateChildNode] = field(default_factory=list)


COMPONENT_TAGS = {"component", "Component"}


def expression_content(expr: Expression) -> str:
    """Raw text of an expression, without serializer rewriting."""
    if isinstance(expr, SimpleExpression):
        return expr.content
    return "".join(
        child if isinstance(child, str) else expression_content(child)
        for child in expr.children
    )


def is_static_exp(expr: Optional[Expression]) -> bool:
    return isinstance(expr, SimpleExpression) and expr.is_static


def is_static_arg_of(arg: Optional[Expression], name: str) -> bool:
    return is_static_exp(arg) and expression_content(arg) == name  # type: ignore[arg-type]


def find_prop(
    node: ElementNode,
    name: str,
    dynamic_only: bool = False,
    allow_empty: bool = False,
) -> Optional[Prop]:
    """Find a static attribute `name` or a `bind` directive targeting `name`."""
    for prop in node.props:
        if isinstance(prop, Attribute):
            if dynamic_only:
                continue
            if prop.name == name and (prop.value or allow_empty):
                return prop
        elif (
            prop.name == "bind"
            and (prop.exp is not None or allow_empty)
            and is_static_arg_of(prop.arg, name)
        ):
            return prop
    return None


def is_user_component(
    node: ElementNode, is_built_in_component: Callable[[str], bool]
) -> bool:
    return (
        node.tag_type == ElementType.COMPONENT
        and node.tag not in COMPONENT_TAGS
        and not is_built_in_component(node.tag)
    )


_HYPHENATE_RE = re.compile(r"\B([A-Z])")


def hyphenate(name: str) -> str:
    """MyComp -> my-comp"""
    return _HYPHENATE_RE.sub(r"-\1", name).lower()
