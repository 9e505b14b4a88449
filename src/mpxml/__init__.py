try:
    from ._version import __version__
except ImportError:
    from importlib.metadata import version, PackageNotFoundError

    try:
        __version__ = version("mpxml")
    except PackageNotFoundError:
        __version__ = "unknown"

from mpxml.compiler.ast_nodes import (
    Attribute,
    CompoundExpression,
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
from mpxml.compiler.dialects import get_dialect
from mpxml.compiler.exceptions import AstLoadError, AuthoringError, MpxmlError
from mpxml.compiler.options import (
    CompilerOptions,
    ComponentOptions,
    EventOptions,
    LazyBinding,
    SlotOptions,
)

__all__ = [
    "Attribute",
    "CompoundExpression",
    "Directive",
    "ElementNode",
    "ElementType",
    "ForMetadata",
    "IfMetadata",
    "IfNode",
    "InterpolationNode",
    "RootNode",
    "SimpleExpression",
    "TextNode",
    "TemplateCodegen",
    "generate",
    "get_dialect",
    "AstLoadError",
    "AuthoringError",
    "MpxmlError",
    "CompilerOptions",
    "ComponentOptions",
    "EventOptions",
    "LazyBinding",
    "SlotOptions",
]
