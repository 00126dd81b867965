#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for AlignWeaver.

This module provides the main CLI entry point and subcommands for assembling
contigs from a multiple alignment of reads.
"""

import logging
import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.schema import (
    ConfigValidationError,
    load_config,
    merge_cli_overrides,
    save_config_template,
    validate_config,
)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    AlignWeaver: overlap-layout-consensus assembly of aligned reads

    Chains reads of a multiple alignment that share a long enough
    suffix/prefix overlap and collapses every chain into a contig.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


def setup_logging(config, output_dir: Path, verbose: bool = False, quiet: bool = False):
    """Configure root logging from the output.logging config section."""
    log_config = config['output']['logging']
    level_name = 'DEBUG' if verbose else 'WARNING' if quiet else str(log_config.get('level', 'INFO')).upper()

    handlers = [logging.StreamHandler()]
    if log_config.get('log_file'):
        handlers.append(logging.FileHandler(output_dir / log_config['log_file']))

    logging.basicConfig(
        level=getattr(logging, level_name),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='alignweaver_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t',
              type=click.Choice(['default', 'strict', 'permissive']),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    assembly = config['assembly']
    click.echo("\nKey Settings:")
    click.echo(f"  Minimum overlap: {assembly['min_overlap']}")
    click.echo(f"  Contig filters: reads >= {assembly['min_reads']}, "
               f"coverage >= {assembly['min_coverage']}, length >= {assembly['min_length']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
def config_show(config_file):
    """Display configuration settings merged over the defaults."""
    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)
    click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))


# ============================================================================
# Assembly Command
# ============================================================================

@main.command()
@click.argument('alignment', type=click.Path(exists=True))
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output directory')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='YAML configuration file')
@click.option('--alignment-id', type=str, default=None,
              help='Identifier used in contig headers (default: file name)')
@click.option('--min-overlap', type=int, default=None,
              help='Minimum overlap in aligned columns')
@click.option('--min-reads', type=int, default=None,
              help='Minimum reads per contig')
@click.option('--min-coverage', type=float, default=None,
              help='Minimum coverage per contig')
@click.option('--min-length', type=int, default=None,
              help='Minimum contig length')
@click.option('--reorder/--no-reorder', default=None,
              help='Write the alignment with reads grouped by contig')
@click.option('--gfa/--no-gfa', default=False,
              help='Also export the overlap graph as GFA')
@click.pass_context
def assemble(ctx, alignment, output, config_file, alignment_id,
             min_overlap, min_reads, min_coverage, min_length, reorder, gfa):
    """
    Assemble contigs from a gapped multiple-alignment FASTA file.

    Examples:
        alignweaver assemble reads_aligned.fasta -o out/

        alignweaver assemble reads_aligned.fasta -o out/ \\
            --min-overlap 30 --min-reads 3 --reorder --gfa
    """
    from .assembly_core import AlignmentAssembler
    from .io_utils import (
        export_assembly_stats,
        export_graph_to_gfa,
        read_alignment_fasta,
        write_contigs_fasta,
        write_reordered_alignment,
    )
    from .utils import AssemblyError, LoggingProgress

    verbose = ctx.obj.get('VERBOSE', False)
    quiet = ctx.obj.get('QUIET', False)
    output_dir = Path(output)

    try:
        config = load_config(Path(config_file) if config_file else None)
    except ConfigValidationError as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)

    config = merge_cli_overrides(config, {
        'assembly.alignment_id': alignment_id,
        'assembly.min_overlap': min_overlap,
        'assembly.min_reads': min_reads,
        'assembly.min_coverage': min_coverage,
        'assembly.min_length': min_length,
        'assembly.reorder_reads': reorder,
    })
    errors = validate_config(config)
    if errors:
        for error in errors:
            click.echo(f"❌ {error}", err=True)
        ctx.exit(1)

    output_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(config, output_dir, verbose=verbose, quiet=quiet)
    logger = logging.getLogger(__name__)

    settings = config['assembly']
    outputs = config['output']
    progress = LoggingProgress()

    try:
        reads = read_alignment_fasta(alignment)
        assembler = AlignmentAssembler()
        nodes, edges = assembler.compute_overlap_graph(settings['min_overlap'], reads, progress)
        count = assembler.compute_contigs(
            settings['alignment_id'] or reads.source_label(),
            settings['min_reads'],
            settings['min_coverage'],
            settings['min_length'],
            reorder=bool(settings['reorder_reads']),
            progress=progress,
        )

        with open(output_dir / outputs['graph_file'], 'w') as f:
            assembler.export_graph(f, progress)
        write_contigs_fasta(assembler.contigs, output_dir / outputs['contigs_file'], progress)
        if outputs.get('stats_file'):
            export_assembly_stats(assembler.contigs, output_dir / outputs['stats_file'])
        if gfa or outputs.get('gfa_file'):
            export_graph_to_gfa(assembler.graph, reads, output_dir / (outputs.get('gfa_file') or 'overlap_graph.gfa'))
        if settings['reorder_reads']:
            write_reordered_alignment(reads, assembler.read_order,
                                      output_dir / outputs['reordered_alignment_file'])

    except (AssemblyError, OSError, ValueError) as e:
        logger.error(f"Assembly failed: {e}", exc_info=verbose)
        click.echo(f"\n❌ Assembly failed: {e}", err=True)
        ctx.exit(1)

    if not quiet:
        click.echo("✅ Assembly complete")
        click.echo(f"  Reads: {reads.count():,}")
        click.echo(f"  Overlap graph: {nodes:,} nodes, {edges:,} edges")
        click.echo(f"  Contigs: {count:,}")
        click.echo(f"  Output directory: {output_dir}")


if __name__ == '__main__':
    main()
