"""Default expression serializer."""

from mpxml.compiler.ast_nodes import CompoundExpression, Expression, SimpleExpression


def gen_expr(expr: Expression) -> str:
    """Serialize a bound expression into template-safe text.

    Upstream transforms have already rewritten expressions into the
    dialect's syntax, so this is a plain concatenation. Compilers with
    their own rewriting pass a different serializer through
    `CompilerOptions.gen_expr`.
    """
    if isinstance(expr, SimpleExpression):
        return expr.content
    if isinstance(expr, CompoundExpression):
        return "".join(
            child if isinstance(child, str) else gen_expr(child)
            for child in expr.children
        )
    raise TypeError(f"Cannot serialize expression of type {type(expr).__name__}")
