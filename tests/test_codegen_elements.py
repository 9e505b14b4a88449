import unittest
from typing import Any, Dict, List

from mpxml.compiler.ast_nodes import (
    Attribute,
    Directive,
    ElementNode,
    ElementType,
    ForMetadata,
    IfMetadata,
    IfNode,
    InterpolationNode,
    RootNode,
    SimpleExpression,
    TextNode,
)
from mpxml.compiler.codegen.template import TemplateCodegen, generate
from mpxml.compiler.exceptions import AuthoringError
from mpxml.compiler.options import CompilerOptions, ComponentOptions, LazyBinding


def static(name: str) -> SimpleExpression:
    return SimpleExpression(content=name, is_static=True)


def dynamic(code: str) -> SimpleExpression:
    return SimpleExpression(content=code)


def on(event: str, handler: SimpleExpression, *modifiers: str) -> Directive:
    return Directive(name="on", arg=static(event), exp=handler, modifiers=list(modifiers))


def bind(arg: str, code: str) -> Directive:
    return Directive(name="bind", arg=static(arg), exp=dynamic(code))


class TestElementCodegen(unittest.TestCase):
    def render(self, *nodes: Any, **options: Any) -> str:
        return generate(RootNode(children=list(nodes)), CompilerOptions(**options))

    def test_static_attribute_and_event_self_closing(self) -> None:
        node = ElementNode(
            tag="view",
            props=[Attribute(name="id", value="a"), on("tap", static("doThing"))],
            is_self_closing=True,
        )
        self.assertEqual(self.render(node), '<view id="a" bindtap="doThing"/>')

    def test_dynamic_event_handler_is_interpolated(self) -> None:
        node = ElementNode(
            tag="view", props=[on("tap", dynamic("handlers[i]"))], is_self_closing=True
        )
        self.assertEqual(self.render(node), '<view bindtap="{{handlers[i]}}"/>')

    def test_event_modifiers(self) -> None:
        cases = [
            (("stop",), "catchtap"),
            (("prevent",), "catchtap"),
            (("capture",), "capture-bind:tap"),
            (("capture", "stop"), "capture-catch:tap"),
        ]
        for modifiers, expected in cases:
            with self.subTest(modifiers=modifiers):
                node = ElementNode(
                    tag="view",
                    props=[on("tap", static("go"), *modifiers)],
                    is_self_closing=True,
                )
                self.assertEqual(self.render(node), f'<view {expected}="go"/>')

    def test_click_becomes_tap_on_native_elements_only(self) -> None:
        view = ElementNode(tag="view", props=[on("click", static("go"))], is_self_closing=True)
        comp = ElementNode(
            tag="MyComp",
            tag_type=ElementType.COMPONENT,
            props=[on("click", static("go"))],
            is_self_closing=True,
        )
        self.assertEqual(self.render(view), '<view bindtap="go"/>')
        self.assertEqual(self.render(comp), '<my-comp bindclick="go"/>')

    def test_custom_event_formatter(self) -> None:
        calls: List[Dict[str, Any]] = []

        def fmt(name: str, **flags: Any) -> str:
            calls.append(dict(flags, name=name))
            return "on-" + name

        from mpxml.compiler.options import EventOptions

        node = ElementNode(
            tag="view", props=[on("tap", static("go"), "stop")], is_self_closing=True
        )
        out = self.render(node, event=EventOptions(format=fmt))
        self.assertEqual(out, '<view on-tap="go"/>')
        self.assertEqual(
            calls,
            [{"name": "tap", "is_catch": True, "is_capture": False, "is_component": False}],
        )

    def test_bare_attribute(self) -> None:
        node = ElementNode(tag="button", props=[Attribute(name="disabled")], children=[TextNode("Go")])
        self.assertEqual(self.render(node), "<button disabled>Go</button>")

    def test_bound_attribute(self) -> None:
        node = ElementNode(tag="view", props=[bind("class", "cls")], is_self_closing=True)
        self.assertEqual(self.render(node), '<view class="{{cls}}"/>')

    def test_children_and_interpolation(self) -> None:
        node = ElementNode(
            tag="text",
            children=[TextNode("Hi "), InterpolationNode(content=dynamic("name"))],
        )
        self.assertEqual(self.render(node), "<text>Hi {{name}}</text>")

    def test_show_uses_hidden(self) -> None:
        node = ElementNode(
            tag="view",
            props=[Directive(name="show", exp=dynamic("visible"))],
            is_self_closing=True,
        )
        self.assertEqual(self.render(node), '<view hidden="{{!visible}}"/>')

    def test_show_without_expression_fails(self) -> None:
        node = ElementNode(tag="view", props=[Directive(name="show", line=4, column=7)])
        with self.assertRaises(AuthoringError) as cm:
            self.render(node)
        self.assertIn("v-show", str(cm.exception))

    def test_item_alias_index_without_index_alias(self) -> None:
        node = ElementNode(tag="view", v_for=ForMetadata("list", "index"), is_self_closing=True)
        self.assertEqual(
            self.render(node), '<view wx:for="{{list}}" wx:for-item="index"/>'
        )

    def test_show_on_user_component_uses_dialect_attribute(self) -> None:
        component = ComponentOptions(v_show="data-c-h")
        comp = ElementNode(
            tag="MyComp",
            tag_type=ElementType.COMPONENT,
            props=[Directive(name="show", exp=dynamic("visible"))],
            is_self_closing=True,
        )
        view = ElementNode(
            tag="view",
            props=[Directive(name="show", exp=dynamic("visible"))],
            is_self_closing=True,
        )
        self.assertEqual(
            self.render(comp, component=component), '<my-comp data-c-h="{{!visible}}"/>'
        )
        self.assertEqual(
            self.render(view, component=component), '<view hidden="{{!visible}}"/>'
        )

    def test_slot_directive(self) -> None:
        named = ElementNode(
            tag="view", props=[Directive(name="slot", arg=static("header"))], is_self_closing=True
        )
        default = ElementNode(
            tag="view", props=[Directive(name="slot", arg=static("default"))], is_self_closing=True
        )
        dynamic_slot = ElementNode(
            tag="view", props=[Directive(name="slot", arg=dynamic("slotName"))], is_self_closing=True
        )
        self.assertEqual(self.render(named), '<view slot="header"/>')
        self.assertEqual(self.render(default), "<view/>")
        self.assertEqual(self.render(dynamic_slot), '<view slot="{{slotName}}"/>')

    def test_bare_bind_emits_nothing(self) -> None:
        node = ElementNode(
            tag="view", props=[Directive(name="bind", exp=dynamic("attrs"))], is_self_closing=True
        )
        self.assertEqual(self.render(node), "<view/>")

    def test_unknown_directive_shape_fails(self) -> None:
        node = ElementNode(
            tag="input",
            props=[Directive(name="model", line=3, column=5)],
            is_self_closing=True,
        )
        with self.assertRaises(AuthoringError) as cm:
            self.render(node, filename="page.wxml")
        self.assertIn("v-model", str(cm.exception))
        self.assertIn("page.wxml:3:5", str(cm.exception))
        self.assertIs(cm.exception.directive, node.props[0])

    def test_event_without_name_fails(self) -> None:
        node = ElementNode(
            tag="view",
            props=[Directive(name="on", exp=dynamic("handlers"))],
            is_self_closing=True,
        )
        with self.assertRaises(AuthoringError):
            self.render(node)

    def test_block_without_props_is_elided(self) -> None:
        children = [
            TextNode("a"),
            ElementNode(tag="text", children=[TextNode("b")]),
        ]
        block = ElementNode(tag="block", children=children)
        expected = self.render(*children)
        self.assertEqual(self.render(block), expected)
        self.assertEqual(expected, "a<text>b</text>")

    def test_template_tag_resolves_to_block(self) -> None:
        node = ElementNode(tag="template", children=[TextNode("x")])
        self.assertEqual(self.render(node), "x")
        with_attr = ElementNode(
            tag="template", props=[Attribute(name="slot", value="left")], children=[TextNode("x")]
        )
        self.assertEqual(self.render(with_attr), '<view slot="left">x</view>')

    def test_block_with_props_is_kept(self) -> None:
        node = ElementNode(
            tag="block", props=[Attribute(name="data-x", value="1")], children=[TextNode("x")]
        )
        self.assertEqual(self.render(node), '<block data-x="1">x</block>')


class TestUserComponentElements(unittest.TestCase):
    def render(self, node: ElementNode, **options: Any) -> str:
        return generate(RootNode(children=[node]), CompilerOptions(**options))

    def test_tag_is_hyphenated(self) -> None:
        node = ElementNode(tag="UserCard", tag_type=ElementType.COMPONENT, is_self_closing=True)
        self.assertEqual(self.render(node), "<user-card/>")

    def test_normalize_name_hook(self) -> None:
        node = ElementNode(tag="UserCard", tag_type=ElementType.COMPONENT, is_self_closing=True)
        component = ComponentOptions(normalize_name=lambda tag: "u-" + tag)
        self.assertEqual(self.render(node, component=component), "<u-user-card/>")

    def test_built_in_component_keeps_tag(self) -> None:
        node = ElementNode(
            tag="KeepAlive", tag_type=ElementType.COMPONENT, children=[TextNode("x")]
        )
        self.assertEqual(self.render(node), "<KeepAlive>x</KeepAlive>")

    def test_virtual_host_duplicates_style(self) -> None:
        node = ElementNode(
            tag="MyComp",
            tag_type=ElementType.COMPONENT,
            props=[Attribute(name="style", value="color:red"), Attribute(name="id", value="c")],
            is_self_closing=True,
        )
        component = ComponentOptions(merge_virtual_host_attributes=True)
        self.assertEqual(
            self.render(node, component=component),
            '<my-comp style="color:red" virtualHostStyle="color:red" id="c"/>',
        )

    def test_virtual_host_duplicates_bound_class(self) -> None:
        node = ElementNode(
            tag="MyComp",
            tag_type=ElementType.COMPONENT,
            props=[bind("class", "cls")],
            is_self_closing=True,
        )
        component = ComponentOptions(merge_virtual_host_attributes=True)
        self.assertEqual(
            self.render(node, component=component),
            '<my-comp class="{{cls}}" virtualHostClass="{{cls}}"/>',
        )

    def test_no_virtual_host_without_merge_flag(self) -> None:
        node = ElementNode(
            tag="MyComp",
            tag_type=ElementType.COMPONENT,
            props=[Attribute(name="style", value="color:red")],
            is_self_closing=True,
        )
        self.assertEqual(self.render(node), '<my-comp style="color:red"/>')


class TestGenerateEntry(unittest.TestCase):
    def test_emit_file_receives_asset(self) -> None:
        assets: List[Dict[str, Any]] = []
        options = CompilerOptions(filename="pages/index.wxml", emit_file=assets.append)
        root = RootNode(children=[ElementNode(tag="view", children=[TextNode("hi")])])

        code = TemplateCodegen(options).generate(root)

        self.assertEqual(code, "<view>hi</view>")
        self.assertEqual(
            assets,
            [{"type": "asset", "fileName": "pages/index.wxml", "source": "<view>hi</view>"}],
        )

    def test_each_generate_call_starts_with_empty_buffer(self) -> None:
        codegen = TemplateCodegen()
        root = RootNode(children=[TextNode("x")])
        self.assertEqual(codegen.generate(root), "x")
        self.assertEqual(codegen.generate(root), "x")

    def test_same_root_compiles_identically_twice(self) -> None:
        slot = ElementNode(
            tag="slot",
            tag_type=ElementType.SLOT,
            props=[Attribute(name="name", value="f")],
            children=[TextNode("Default")],
        )
        template = ElementNode(
            tag="template",
            tag_type=ElementType.TEMPLATE,
            props=[Directive(name="slot", arg=static("h"))],
            children=[ElementNode(tag="view", children=[TextNode("Hi")])],
        )
        branches = IfNode(
            branches=[
                ElementNode(tag="view", v_if=IfMetadata("if", "a")),
                ElementNode(
                    tag="editor",
                    v_if=IfMetadata("else"),
                    props=[on("ready", static("r"))],
                    is_self_closing=True,
                ),
            ]
        )
        root = RootNode(children=[slot, template, branches])
        codegen = TemplateCodegen(
            CompilerOptions(lazy_element={"editor": [LazyBinding("on", ["ready"])]})
        )
        expected = (
            '<block wx:if="{{$slots.f}}"><slot name="f"></slot></block>'
            "<block wx:else>Default</block>"
            '<view slot="h">Hi</view>'
            '<view wx:if="{{a}}"></view>'
            '<block wx:else><editor wx:if="{{r0}}" bindready="r"/></block>'
        )

        self.assertEqual(codegen.generate(root), expected)
        self.assertEqual(codegen.generate(root), expected)
        self.assertEqual(len(slot.children), 1)
        self.assertEqual(template.children[0].props, [])  # type: ignore[union-attr]
        self.assertEqual(branches.branches[1].v_if, IfMetadata("else"))  # type: ignore[union-attr]

    def test_custom_expression_serializer(self) -> None:
        options = CompilerOptions(gen_expr=lambda expr: f"_s({expr.content})")  # type: ignore[union-attr]
        root = RootNode(children=[InterpolationNode(content=dynamic("msg"))])
        self.assertEqual(generate(root, options), "{{_s(msg)}}")

    def test_debug_logging(self) -> None:
        with self.assertLogs("mpxml.compiler.codegen.template", level="DEBUG") as cm:
            generate(RootNode(children=[TextNode("x")]), CompilerOptions(filename="a.wxml"))
        self.assertTrue(any("a.wxml" in line for line in cm.output))


if __name__ == "__main__":
    unittest.main()
