import json
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .log import configure_logging
from .pipeline import CodeGeneratorConfig, CsdlError, OutputMode, PipelineGenerator


@click.command()
@click.option("--output-dir", "-o", default=".", type=click.Path(file_okay=False, resolve_path=True), help="Directory for the generated package")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True), help="JSON code generation config")
@click.option("--mode", default=None, type=click.Choice([m.value for m in OutputMode]), help="What to do when an output file already exists")
@click.option("--support/--no-support", default=True, help="Emit the runtime-support module")
@click.option("--format/--no-format", "format_", default=False, help="Run ruff format over generated modules")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug events")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, resolve_path=True))
def csdl_to_code(output_dir, config, mode, support, format_, verbose, paths):
    """Generate Python dataclasses from CSDL documents (.xml files, .zip archives or directories)."""
    configure_logging(verbose)

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if mode is not None:
        config.output.mode = OutputMode(mode)
    if not support:
        config.emit_support_module = False
    if format_:
        config.formatter.enabled = True

    try:
        codegen = PipelineGenerator.from_paths(paths, config, reconstruct_command_line(csdl_to_code))
        written = codegen.write(Path(output_dir))
    except CsdlError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Wrote {len(written)} files to {output_dir}")
