"""Template markup code generation."""

import copy
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from mpxml.compiler.ast_nodes import (
    Attribute,
    Directive,
    ElementNode,
    ElementType,
    Expression,
    ForMetadata,
    IfMetadata,
    IfNode,
    InterpolationNode,
    Prop,
    RootNode,
    SimpleExpression,
    TemplateChildNode,
    TextNode,
    expression_content,
    find_prop,
    hyphenate,
    is_static_exp,
    is_user_component,
)
from mpxml.compiler.events import format_mini_program_event
from mpxml.compiler.exceptions import AuthoringError
from mpxml.compiler.options import (
    CompilerOptions,
    ComponentOptions,
    EventOptions,
    LazyBinding,
    LazyElement,
    SlotOptions,
)

logger = logging.getLogger(__name__)

SLOT_DEFAULT_NAME = "d"
# Bound by the runtime once the first render has completed
READY_CONDITION = "r0"
ATTR_VUE_PROPS = "u-p"
VIRTUAL_HOST_STYLE = "virtualHostStyle"
VIRTUAL_HOST_CLASS = "virtualHostClass"
VIRTUAL_HOST_PROPS = {"style": VIRTUAL_HOST_STYLE, "class": VIRTUAL_HOST_CLASS}


def dynamic_slot_name(name: str) -> str:
    return SLOT_DEFAULT_NAME if name == "default" else name


def mustache(code: str) -> str:
    return "{{" + code + "}}"


@dataclass
class TemplateCodegenContext:
    """Per-compilation state: the output buffer plus read-only configuration."""

    directive: str
    filename: str
    scope_id: Optional[str]
    event: EventOptions
    slot: SlotOptions
    component: Optional[ComponentOptions]
    lazy_element: Optional[LazyElement]
    is_built_in_component: Callable[[str], bool]
    is_mini_program_component: Callable[[str], bool]
    gen_expr: Callable[[Expression], str]
    parts: List[str] = field(default_factory=list)

    @classmethod
    def from_options(cls, options: CompilerOptions) -> "TemplateCodegenContext":
        return cls(
            directive=options.directive,
            filename=options.filename,
            scope_id=options.scope_id,
            event=options.event,
            slot=options.slot,
            component=options.component,
            lazy_element=options.lazy_element,
            is_built_in_component=options.is_built_in_component,
            is_mini_program_component=options.is_mini_program_component,
            gen_expr=options.gen_expr,
        )

    def push(self, code: str) -> None:
        self.parts.append(code)

    @property
    def code(self) -> str:
        return "".join(self.parts)


class TemplateCodegen:
    """Generates mini-program markup from an annotated template AST."""

    def __init__(self, options: Optional[CompilerOptions] = None) -> None:
        self.options = options or CompilerOptions()

    def generate(self, root: RootNode) -> str:
        """Compile `root` into markup and hand it to `emit_file` if configured."""
        # Lowering rewrites nodes in place; keep the caller's tree intact
        root = copy.deepcopy(root)
        context = TemplateCodegenContext.from_options(self.options)
        logger.debug(
            "Generating %s (%d top-level nodes, directive=%r)",
            self.options.filename or "<template>",
            len(root.children),
            context.directive,
        )
        for node in root.children:
            self.gen_node(node, context)

        code = context.code
        if self.options.emit_file is not None:
            self.options.emit_file(
                {"type": "asset", "fileName": self.options.filename, "source": code}
            )
        logger.debug("Generated %d characters", len(code))
        return code

    # --- Dispatch ---

    def gen_node(self, node: TemplateChildNode, context: TemplateCodegenContext) -> None:
        if isinstance(node, IfNode):
            for branch in node.branches:
                self.gen_node(branch, context)
        elif isinstance(node, TextNode):
            context.push(node.content)
        elif isinstance(node, InterpolationNode):
            context.push(mustache(context.gen_expr(node.content)))
        elif isinstance(node, ElementNode):
            if node.tag_type == ElementType.SLOT:
                self.gen_slot(node, context)
            elif node.tag_type == ElementType.COMPONENT:
                self.gen_component(node, context)
            elif node.tag_type == ElementType.TEMPLATE:
                self.gen_template(node, context)
            elif self.is_lazy_element(node, context):
                self.gen_lazy_element(node, context)
            else:
                self.gen_element(node, context)
        else:
            raise TypeError(f"Unknown template node type: {type(node).__name__}")

    # --- Control flow ---

    def gen_v_if(self, exp: str, context: TemplateCodegenContext) -> None:
        context.push(f' {context.directive}if="{mustache(exp)}"')

    def gen_v_else_if(self, exp: str, context: TemplateCodegenContext) -> None:
        context.push(f' {context.directive}elif="{mustache(exp)}"')

    def gen_v_else(self, context: TemplateCodegenContext) -> None:
        context.push(f" {context.directive}else")

    def gen_v_if_code(self, v_if: IfMetadata, context: TemplateCodegenContext) -> None:
        if v_if.name == "if":
            self.gen_v_if(v_if.condition or "", context)
        elif v_if.name == "else-if":
            self.gen_v_else_if(v_if.condition or "", context)
        elif v_if.name == "else":
            self.gen_v_else(context)

    def gen_v_for(self, node: ElementNode, context: TemplateCodegenContext) -> None:
        v_for: ForMetadata = node.v_for  # type: ignore[assignment]
        directive = context.directive
        context.push(f' {directive}for="{mustache(v_for.source)}"')
        if v_for.value_alias:
            context.push(f' {directive}for-item="{v_for.value_alias}"')
        # An item alias named 'index' would shadow the dialect's implicit index
        if v_for.value_alias == "index" and v_for.index_alias:
            context.push(f' {directive}for-index="{v_for.index_alias}"')

        key_prop = find_prop(node, "key", dynamic_only=True)
        if isinstance(key_prop, Directive) and key_prop.exp is not None:
            key = context.gen_expr(key_prop.exp)
            if "." in key:
                key = key.split(".", 1)[1]
            context.push(f' {directive}key="{key}"')
            node.props = [prop for prop in node.props if prop is not key_prop]

    # --- Slots ---

    def gen_slot(self, node: ElementNode, context: TemplateCodegenContext) -> None:
        # Projection is selected by name only; scoped slot bindings are dropped
        node.props = [prop for prop in node.props if _is_slot_name_prop(prop)]
        if not node.children or context.slot.fallback_content:
            self.gen_element(node, context)
            return

        v_if = node.v_if
        if v_if is not None:
            context.push("<block")
            self.gen_v_if_code(v_if, context)
            context.push(">")
            node.v_if = None

        children = list(node.children)
        node.children = []

        context.push("<block")
        self.gen_v_if(f"$slots.{_slot_outlet_name(node)}", context)
        context.push(">")
        self.gen_element(node, context)
        context.push("</block>")
        context.push("<block")
        self.gen_v_else(context)
        context.push(">")
        for child in children:
            self.gen_node(child, context)
        context.push("</block>")

        if v_if is not None:
            context.push("</block>")

    # --- <template> ---

    def gen_template(self, node: ElementNode, context: TemplateCodegenContext) -> None:
        slot_prop = next(
            (
                prop
                for prop in node.props
                if isinstance(prop, Directive)
                and (
                    prop.name == "slot"
                    or (
                        prop.name == "bind"
                        and isinstance(prop.arg, SimpleExpression)
                        and prop.arg.content == "slot"
                    )
                )
            ),
            None,
        )
        # Named slot roots become <view slot="..."> on every dialect; <block>
        # is not accepted as a slot root everywhere.
        node.tag = "view" if slot_prop is not None else "block"
        node.tag_type = ElementType.ELEMENT

        # A lone child can carry the slot itself, avoiding an extra view in
        # flex layouts
        if slot_prop is not None and node.v_for is None and len(node.children) == 1:
            child = node.children[0]
            if (
                isinstance(child, ElementNode)
                and child.v_for is None
                and child.tag_type != ElementType.SLOT
            ):
                child.props.append(slot_prop)
                self.gen_element(child, context)
                return

        self.gen_element(node, context)

    # --- Components ---

    def gen_component(self, node: ElementNode, context: TemplateCodegenContext) -> None:
        component = context.component
        if component is not None and component.get_property_sync:
            self.gen_element(node, context)
            return
        if node.v_if is not None or node.v_for is not None:
            self.gen_element(node, context)
            return
        if context.is_mini_program_component(node.tag):
            # Native components wait for the first binding before rendering
            logger.debug("Guarding native component <%s> with %s", node.tag, READY_CONDITION)
            node.v_if = IfMetadata(name="if", condition=READY_CONDITION)
            self.gen_element(node, context)
            return
        prop = find_prop(node, ATTR_VUE_PROPS, dynamic_only=True)
        if isinstance(prop, Directive) and prop.exp is not None:
            node.v_if = IfMetadata(name="if", condition=context.gen_expr(prop.exp))
        self.gen_element(node, context)

    # --- Lazy elements ---

    def is_lazy_element(self, node: ElementNode, context: TemplateCodegenContext) -> bool:
        lazy_element = context.lazy_element
        if not lazy_element:
            return False
        if callable(lazy_element):
            result = lazy_element(node, context)
            if not isinstance(result, dict):
                return bool(result)
            lazy_props = result.get(node.tag)
        else:
            lazy_props = lazy_element.get(node.tag)
        if lazy_props is True:
            return True
        if not lazy_props:
            return False
        return any(
            isinstance(prop, Directive) and _matches_lazy_binding(prop, lazy_props)
            for prop in node.props
        )

    def gen_lazy_element(self, node: ElementNode, context: TemplateCodegenContext) -> None:
        """Delay elements whose events fire during initialization.

        Some built-in components emit events immediately, before the first
        render has bound the handlers; they are guarded by the readiness
        variable.
        """
        v_if = node.v_if
        if v_if is None:
            context.push("<block")
            self.gen_v_if(READY_CONDITION, context)
            context.push(">")
            self.gen_element(node, context)
            context.push("</block>")
            return
        # if / else-if already have their own condition
        if v_if.name != "else":
            self.gen_element(node, context)
            return
        context.push("<block")
        self.gen_v_else(context)
        context.push(">")
        v_if.name = "if"
        v_if.condition = READY_CONDITION
        self.gen_element(node, context)
        context.push("</block>")

    # --- Elements ---

    def gen_element(self, node: ElementNode, context: TemplateCodegenContext) -> None:
        tag = node.tag
        # <template slot="left"/> => <view slot="left"/>
        if tag == "template":
            tag = "view" if find_prop(node, "slot") else "block"

        # A bare block renders nothing of its own
        if tag == "block" and not node.props and node.v_if is None and node.v_for is None:
            for child in node.children:
                self.gen_node(child, context)
            return

        virtual_host = False
        if is_user_component(node, context.is_built_in_component):
            tag = hyphenate(tag)
            component = context.component
            if component is not None:
                if component.normalize_name is not None:
                    tag = component.normalize_name(tag)
                if component.merge_virtual_host_attributes:
                    virtual_host = True

        has_v_if = node.v_if is not None
        has_v_for = node.v_for is not None
        has_v_if_and_v_for = has_v_if and has_v_for

        # else / elif cannot share a tag with for, hoist the condition
        if has_v_if_and_v_for:
            context.push("<block")
            self.gen_v_if_code(node.v_if, context)  # type: ignore[arg-type]
            context.push(">")
        context.push(f"<{tag}")
        if has_v_if and not has_v_for:
            self.gen_v_if_code(node.v_if, context)  # type: ignore[arg-type]
        if has_v_for:
            self.gen_v_for(node, context)
        if node.props:
            self.gen_element_props(node, virtual_host, context)

        if node.is_self_closing:
            context.push("/>")
        else:
            context.push(">")
            for child in node.children:
                self.gen_node(child, context)
            context.push(f"</{tag}>")
        if has_v_if_and_v_for:
            context.push("</block>")

    def gen_element_props(
        self, node: ElementNode, virtual_host: bool, context: TemplateCodegenContext
    ) -> None:
        for prop in node.props:
            if isinstance(prop, Attribute):
                if prop.value is not None:
                    for name in _virtual_host_names(prop.name, virtual_host):
                        context.push(f' {name}="{prop.value}"')
                else:
                    context.push(f" {prop.name}")
            elif prop.name == "on":
                self._gen_on(prop, node, context)
            else:
                self._gen_directive(prop, node, virtual_host, context)

    def _gen_on(
        self, prop: Directive, node: ElementNode, context: TemplateCodegenContext
    ) -> None:
        if prop.arg is None or prop.exp is None:
            raise self._authoring_error(
                f"Event binding {prop.raw_name} needs an event name and a handler",
                prop,
                context,
            )
        format_event = context.event.format or format_mini_program_event
        name = format_event(
            expression_content(prop.arg),
            is_catch="stop" in prop.modifiers or "prevent" in prop.modifiers,
            is_capture="capture" in prop.modifiers,
            is_component=is_user_component(node, context.is_built_in_component),
        )
        if is_static_exp(prop.exp):
            context.push(f' {name}="{expression_content(prop.exp)}"')
        else:
            context.push(f' {name}="{mustache(context.gen_expr(prop.exp))}"')

    def _gen_directive(
        self,
        prop: Directive,
        node: ElementNode,
        virtual_host: bool,
        context: TemplateCodegenContext,
    ) -> None:
        if prop.name == "slot":
            if prop.arg is None:
                return
            if is_static_exp(prop.arg):
                slot_name = dynamic_slot_name(expression_content(prop.arg))
                # Default slot content needs no slot attribute
                if slot_name != SLOT_DEFAULT_NAME:
                    context.push(f' slot="{slot_name}"')
            else:
                context.push(f' slot="{mustache(context.gen_expr(prop.arg))}"')
        elif prop.name == "show":
            if prop.exp is None:
                raise self._authoring_error(
                    f"{prop.raw_name} requires an expression", prop, context
                )
            hidden_prop_name = "hidden"
            component = context.component
            if (
                component is not None
                and component.v_show
                and is_user_component(node, context.is_built_in_component)
            ):
                hidden_prop_name = component.v_show
            context.push(
                f' {hidden_prop_name}="{mustache("!" + context.gen_expr(prop.exp))}"'
            )
        elif prop.arg is not None and prop.exp is not None:
            exp = context.gen_expr(prop.exp)
            for name in _virtual_host_names(expression_content(prop.arg), virtual_host):
                context.push(f' {name}="{mustache(exp)}"')
        elif prop.name != "bind":
            raise self._authoring_error(
                f"Unknown directive {prop.raw_name}", prop, context
            )

    def _authoring_error(
        self, message: str, prop: Directive, context: TemplateCodegenContext
    ) -> AuthoringError:
        return AuthoringError(
            message,
            directive=prop,
            file_path=context.filename,
            line=prop.line or None,
            column=prop.column if prop.line else None,
        )


def _is_slot_name_prop(prop: Prop) -> bool:
    if isinstance(prop, Attribute):
        return prop.name == "name"
    return isinstance(prop.arg, SimpleExpression) and prop.arg.content == "name"


def _slot_outlet_name(node: ElementNode) -> str:
    name_prop = find_prop(node, "name")
    if isinstance(name_prop, Attribute):
        if name_prop.value:
            return name_prop.value
    elif isinstance(name_prop, Directive) and name_prop.slot_name:
        return name_prop.slot_name
    return SLOT_DEFAULT_NAME


def _matches_lazy_binding(prop: Directive, lazy_props: List[LazyBinding]) -> bool:
    if not isinstance(prop.arg, SimpleExpression):
        return False
    return any(
        prop.name == binding.name and prop.arg.content in binding.arg  # type: ignore[union-attr]
        for binding in lazy_props
    )


def _virtual_host_names(name: str, virtual_host: bool) -> List[str]:
    names = [name]
    if virtual_host and name in VIRTUAL_HOST_PROPS:
        names.append(VIRTUAL_HOST_PROPS[name])
    return names


def generate(root: RootNode, options: Optional[CompilerOptions] = None) -> str:
    """Compile a template AST with a fresh generator."""
    return TemplateCodegen(options).generate(root)
