"""Load annotated template ASTs from their JSON interchange form.

A document looks like::

    {"type": "root", "children": [
        {"type": "element", "tag": "view", "tagType": "element",
         "props": [{"type": "attribute", "name": "id", "value": "a"},
                   {"type": "directive", "name": "on", "arg": "tap",
                    "exp": {"type": "simple", "content": "onTap", "isStatic": true}}],
         "vIf": {"name": "if", "condition": "show"},
         "children": [{"type": "text", "content": "Hello"}]}
    ]}

`arg` given as a plain string is a static name, `exp` given as a plain
string is dynamic code.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from mpxml.compiler.ast_nodes import (
    Attribute,
    CompoundExpression,
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
)
from mpxml.compiler.exceptions import AstLoadError

IF_BRANCH_NAMES = {"if", "else-if", "else"}


class AstLoader:
    """Builds AST nodes from decoded JSON, tracking the path for errors."""

    def __init__(self, file_path: str = "") -> None:
        self.file_path = file_path

    def load_root(self, data: Any) -> RootNode:
        obj = self._expect_object(data, "$")
        if obj.get("type", "root") != "root":
            raise self._error(f"Expected a root node, got '{obj.get('type')}'", "$")
        return RootNode(children=self._load_children(obj, "$"))

    def _load_children(self, obj: Dict[str, Any], path: str) -> List[TemplateChildNode]:
        children = obj.get("children", [])
        if not isinstance(children, list):
            raise self._error("'children' must be a list", f"{path}.children")
        return [
            self.load_node(child, f"{path}.children[{i}]")
            for i, child in enumerate(children)
        ]

    def load_node(self, data: Any, path: str) -> TemplateChildNode:
        obj = self._expect_object(data, path)
        node_type = obj.get("type")
        line, column = obj.get("line", 0), obj.get("column", 0)

        if node_type == "text":
            return TextNode(
                content=self._expect_str(obj.get("content", ""), f"{path}.content"),
                line=line,
                column=column,
            )
        if node_type == "interpolation":
            return InterpolationNode(
                content=self._load_expression(obj.get("content"), f"{path}.content", False),
                line=line,
                column=column,
            )
        if node_type == "if":
            branches = obj.get("branches")
            if not isinstance(branches, list) or not branches:
                raise self._error("'branches' must be a non-empty list", f"{path}.branches")
            nodes = []
            for i, branch in enumerate(branches):
                branch_path = f"{path}.branches[{i}]"
                node = self.load_node(branch, branch_path)
                if not isinstance(node, ElementNode):
                    raise self._error("Conditional branches must be elements", branch_path)
                nodes.append(node)
            return IfNode(branches=nodes, line=line, column=column)
        if node_type == "element":
            return self._load_element(obj, path)
        raise self._error(f"Unknown node type '{node_type}'", f"{path}.type")

    def _load_element(self, obj: Dict[str, Any], path: str) -> ElementNode:
        tag = self._expect_str(obj.get("tag"), f"{path}.tag")
        try:
            tag_type = ElementType(obj.get("tagType", "element"))
        except ValueError:
            raise self._error(
                f"Unknown tagType '{obj.get('tagType')}'", f"{path}.tagType"
            ) from None

        props_data = obj.get("props", [])
        if not isinstance(props_data, list):
            raise self._error("'props' must be a list", f"{path}.props")

        return ElementNode(
            tag=tag,
            tag_type=tag_type,
            props=[
                self._load_prop(prop, f"{path}.props[{i}]")
                for i, prop in enumerate(props_data)
            ],
            children=self._load_children(obj, path),
            is_self_closing=bool(obj.get("isSelfClosing", False)),
            v_if=self._load_v_if(obj.get("vIf"), f"{path}.vIf"),
            v_for=self._load_v_for(obj.get("vFor"), f"{path}.vFor"),
            line=obj.get("line", 0),
            column=obj.get("column", 0),
        )

    def _load_prop(self, data: Any, path: str) -> Prop:
        obj = self._expect_object(data, path)
        prop_type = obj.get("type")
        name = self._expect_str(obj.get("name"), f"{path}.name")
        line, column = obj.get("line", 0), obj.get("column", 0)

        if prop_type == "attribute":
            value = obj.get("value")
            if value is not None:
                value = self._expect_str(value, f"{path}.value")
            return Attribute(name=name, value=value, line=line, column=column)
        if prop_type == "directive":
            modifiers = obj.get("modifiers", [])
            if not isinstance(modifiers, list):
                raise self._error("'modifiers' must be a list", f"{path}.modifiers")
            return Directive(
                name=name,
                arg=self._load_expression(obj.get("arg"), f"{path}.arg", True),
                exp=self._load_expression(obj.get("exp"), f"{path}.exp", False),
                modifiers=[str(m) for m in modifiers],
                slot_name=obj.get("slotName"),
                line=line,
                column=column,
            )
        raise self._error(f"Unknown prop type '{prop_type}'", f"{path}.type")

    def _load_expression(
        self, data: Any, path: str, static_by_default: bool
    ) -> Optional[Expression]:
        if data is None:
            return None
        if isinstance(data, str):
            return SimpleExpression(content=data, is_static=static_by_default)
        obj = self._expect_object(data, path)
        expr_type = obj.get("type", "simple")
        if expr_type == "simple":
            return SimpleExpression(
                content=self._expect_str(obj.get("content"), f"{path}.content"),
                is_static=bool(obj.get("isStatic", False)),
            )
        if expr_type == "compound":
            parts = obj.get("children")
            if not isinstance(parts, list):
                raise self._error("'children' must be a list", f"{path}.children")
            children: List[Union[SimpleExpression, CompoundExpression, str]] = []
            for i, part in enumerate(parts):
                if isinstance(part, str):
                    children.append(part)
                else:
                    children.append(
                        self._load_expression(part, f"{path}.children[{i}]", False)  # type: ignore[arg-type]
                    )
            return CompoundExpression(children=children)
        raise self._error(f"Unknown expression type '{expr_type}'", f"{path}.type")

    def _load_v_if(self, data: Any, path: str) -> Optional[IfMetadata]:
        if data is None:
            return None
        obj = self._expect_object(data, path)
        name = obj.get("name")
        if name not in IF_BRANCH_NAMES:
            raise self._error(f"Unknown conditional branch '{name}'", f"{path}.name")
        condition = obj.get("condition")
        if name != "else" and not isinstance(condition, str):
            raise self._error(f"'{name}' branch needs a condition", f"{path}.condition")
        return IfMetadata(name=name, condition=condition)

    def _load_v_for(self, data: Any, path: str) -> Optional[ForMetadata]:
        if data is None:
            return None
        obj = self._expect_object(data, path)
        return ForMetadata(
            source=self._expect_str(obj.get("source"), f"{path}.source"),
            value_alias=obj.get("valueAlias"),
            index_alias=obj.get("indexAlias"),
        )

    def _expect_object(self, data: Any, path: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise self._error(f"Expected an object, got {type(data).__name__}", path)
        return data

    def _expect_str(self, data: Any, path: str) -> str:
        if not isinstance(data, str):
            raise self._error(f"Expected a string, got {type(data).__name__}", path)
        return data

    def _error(self, message: str, path: str) -> AstLoadError:
        return AstLoadError(message, path=path, file_path=self.file_path)


def loads(content: str, file_path: str = "") -> RootNode:
    """Parse a JSON document string into a `RootNode`."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AstLoadError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            file_path=file_path,
        ) from e
    return AstLoader(file_path).load_root(data)


def load_document(file_path: Path) -> RootNode:
    """Read and parse a JSON AST document from disk."""
    with open(file_path, "r", encoding="utf-8") as f:
        content = f.read()
    return loads(content, str(file_path))
