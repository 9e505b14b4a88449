"""Compile JSON template documents into dialect markup files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set

from mpxml.compiler.ast_loader import load_document
from mpxml.compiler.codegen.template import TemplateCodegen
from mpxml.compiler.dialects import Dialect, get_dialect
from mpxml.compiler.emitter import FileEmitter
from mpxml.compiler.options import SlotOptions

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    source: Path
    file_name: str
    code: str
    output_path: Optional[Path] = None


@dataclass
class BuildSummary:
    dialect: str
    out_dir: Optional[Path]
    results: List[CompileResult] = field(default_factory=list)

    @property
    def templates(self) -> int:
        return len(self.results)


class TemplateBuilder:
    """Compiles documents for one dialect, optionally writing them out."""

    def __init__(
        self,
        dialect: Dialect,
        out_dir: Optional[Path] = None,
        scope_id: Optional[str] = None,
        fallback_content: Optional[bool] = None,
        native_components: Iterable[str] = (),
    ) -> None:
        self.dialect = dialect
        self.out_dir = out_dir
        self.scope_id = scope_id
        self.fallback_content = fallback_content
        self.native_components: Set[str] = set(native_components)
        self.emitter = FileEmitter(out_dir) if out_dir is not None else None

    def _is_native_component(self, tag: str) -> bool:
        return tag in self.native_components

    def compile_file(self, source: Path) -> CompileResult:
        root = load_document(source)
        file_name = self.dialect.template_filename(source.stem)

        slot = SlotOptions(
            fallback_content=self.dialect.slot.fallback_content
            if self.fallback_content is None
            else self.fallback_content
        )
        options = self.dialect.options(
            filename=file_name,
            scope_id=self.scope_id,
            slot=slot,
            is_mini_program_component=self._is_native_component,
            emit_file=self.emitter,
        )
        code = TemplateCodegen(options).generate(root)

        output_path = None
        if self.emitter is not None:
            output_path = self.emitter.emitted[-1]
        logger.info("Compiled %s -> %s", source, output_path or file_name)
        return CompileResult(
            source=source, file_name=file_name, code=code, output_path=output_path
        )

    def build(self, sources: Iterable[Path]) -> BuildSummary:
        summary = BuildSummary(dialect=self.dialect.name, out_dir=self.out_dir)
        for source in sources:
            summary.results.append(self.compile_file(source))
        return summary


def build_templates(
    sources: Iterable[Path],
    dialect: str = "weixin",
    out_dir: Optional[Path] = None,
    scope_id: Optional[str] = None,
    fallback_content: Optional[bool] = None,
    native_components: Iterable[str] = (),
) -> BuildSummary:
    """Compile every source document for `dialect`."""
    builder = TemplateBuilder(
        get_dialect(dialect),
        out_dir=out_dir,
        scope_id=scope_id,
        fallback_content=fallback_content,
        native_components=native_components,
    )
    return builder.build(sources)
