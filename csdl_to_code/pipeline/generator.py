"""
Pipeline generator: CSDL documents in, Python modules out.

Phases:
1. Load documents into a raw record set
2. Build the type model and fold inheritance
3. Group folded types by vendor and analyze each group into IR
4. Render modules, the runtime-support module and the package initializer
5. Optionally format, then write atomically
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from .. import __version__
from .analyzer import SchemaAnalyzer, build_model, fold_model, group_types
from .analyzer.type_model import AliasTable, TypeModel
from .ast_backends import PythonAstBackend, SupportModuleRenderer
from .config import CodeGeneratorConfig
from .formatters import RuffFormatter
from .output import AtomicWriter
from .schema_ast import CsdlParser, RecordSet

logger = structlog.get_logger(__name__)

PACKAGE_INIT = "__init__.py"


class PipelineGenerator:
    """Runs the full CSDL to Python pipeline."""

    def __init__(self, record_set: RecordSet, config: CodeGeneratorConfig | None = None, command_line: str = "csdl_to_code"):
        """
        Initialize the generator.

        Args:
            record_set: Parsed schema documents
            config: Code generation configuration
            command_line: Invocation recorded in the generation comment
        """
        self.record_set = record_set
        self.config = config or CodeGeneratorConfig()
        self.command_line = command_line
        self._resolved: tuple[TypeModel, AliasTable] | None = None

    @classmethod
    def from_paths(cls, paths: Iterable[str | Path], config: CodeGeneratorConfig | None = None, command_line: str = "csdl_to_code") -> PipelineGenerator:
        """
        Load ``.xml`` files, ``.zip`` archives and directories.

        Raises:
            SchemaLoadError: If a document cannot be read
        """
        parser = CsdlParser()
        for path in paths:
            parser.add_path(path)
        return cls(parser.parse(), config, command_line)

    def resolve(self) -> tuple[TypeModel, AliasTable]:
        """
        Build the type model and fold every inheritance chain.

        Raises:
            FoldCycleError: If base types form a cycle
        """
        if self._resolved is None:
            model, aliases = build_model(self.record_set)
            fold_model(model, aliases)
            self._resolved = (model, aliases)
        return self._resolved

    def generation_comment(self) -> str:
        if not self.config.add_generation_comment:
            return ""
        return f"# Generated by csdl_to_code v{__version__} : {self.command_line}"

    def generate(self) -> dict[str, str]:
        """
        Generate all output files.

        Returns:
            Mapping of file name to file content

        Raises:
            CsdlError: On any fatal pipeline error
        """
        model, aliases = self.resolve()
        analyzer = SchemaAnalyzer(model, aliases, self.config)
        backend = PythonAstBackend(self.config)
        support = SupportModuleRenderer(self.config)
        comment = self.generation_comment()

        files: dict[str, str] = {}
        groups = group_types(model)
        modules = []
        for name in sorted(groups):
            ir = analyzer.analyze(groups[name], comment)
            if not ir.classes:
                continue
            modules.append(name)
            files[backend.file_name(name)] = self._format(backend.generate(ir))

        if self.config.emit_support_module:
            files[backend.file_name(self.config.support_module)] = support.render_support(comment)
        files[PACKAGE_INIT] = support.render_package(modules, comment)

        logger.info("generation_complete", modules=len(modules), types=len(model))
        return files

    def write(self, output_dir: str | Path) -> list[Path]:
        """
        Generate and write all output files into ``output_dir``.

        Raises:
            OutputWriteError: If a file exists in error mode or cannot be written
        """
        output_dir = Path(output_dir)
        writer = AtomicWriter(self.config.output)
        files = {output_dir / name: content for name, content in self.generate().items()}
        writer.check_targets(files)
        written = []
        for path, content in files.items():
            writer.write(path, content)
            written.append(path)
        logger.info("files_written", directory=str(output_dir), count=len(written))
        return written

    def _format(self, code: str) -> str:
        if not self.config.formatter.enabled:
            return code
        return RuffFormatter().format(code, self.config.formatter)
