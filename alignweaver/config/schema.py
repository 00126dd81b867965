"""
AlignWeaver v0.1.0

Configuration schema for AlignWeaver.

Defines all available configuration parameters with defaults and validation.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
import os
import re
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml


class ConfigValidationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Assembly
    # ========================================================================
    'assembly': {
        'alignment_id': None,  # Contig header prefix; default: input file name
        'min_overlap': 20,  # Minimum residues shared by overlapping reads
        'min_reads': 5,  # Contigs with fewer contributing reads are discarded
        'min_coverage': 2.0,  # Contributing residues per contig position
        'min_length': 200,  # Minimum contig length
        'reorder_reads': False,  # Write the alignment grouped by contig
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'contigs_file': 'contigs.fasta',
        'graph_file': 'overlap_graph.gml',
        'gfa_file': None,  # e.g. 'overlap_graph.gfa'
        'reordered_alignment_file': 'reordered_alignment.fasta',
        'stats_file': 'assembly_stats.json',

        # Logging
        'logging': {
            'level': 'INFO',  # DEBUG, INFO, WARNING, ERROR
            'log_file': None,  # Relative to the output directory
        },
    },
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_path is given but missing
        ConfigValidationError: If the file is not valid YAML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in config file {config_path}: {e}")

        if user_config:
            if not isinstance(user_config, dict):
                raise ConfigValidationError(f"Config file {config_path} must contain a mapping")
            # Deep merge user config into defaults
            config = _deep_merge(config, _substitute_env_vars(user_config))

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _substitute_env_vars(config: Any) -> Any:
    """
    Recursively substitute environment variables in configuration.

    Supports:
    - ${VAR}: Replace with environment variable VAR
    - ${VAR:-default}: Replace with VAR, or 'default' if not set

    A value that is exactly one reference and resolves to a number becomes
    an int or float, so thresholds can come from the environment.
    """
    if isinstance(config, dict):
        return {k: _substitute_env_vars(v) for k, v in config.items()}

    elif isinstance(config, list):
        return [_substitute_env_vars(item) for item in config]

    elif isinstance(config, str):
        pattern = r'\$\{([^}:]+)(?::-(.*?))?\}'

        def replace_var(match):
            return os.environ.get(match.group(1), match.group(2) or '')

        result = re.sub(pattern, replace_var, config)
        if re.fullmatch(pattern, config):
            return _coerce_number(result)
        return result

    else:
        return config


def _coerce_number(value: str) -> Any:
    """Return value as an int or float if it spells one, else unchanged."""
    if not any(c.isdigit() for c in value):
        return value
    for cast in (int, float):
        try:
            return cast(value.strip())
        except ValueError:
            continue
    return value


def merge_cli_overrides(config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge command-line overrides into configuration.

    Args:
        config: Configuration dictionary
        overrides: Keys in dotted notation (e.g. 'assembly.min_overlap');
                   None values are ignored

    Returns:
        New configuration dictionary
    """
    result = copy.deepcopy(config)
    for key, value in overrides.items():
        if value is None:
            continue
        keys = key.split('.')
        target = result
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value
    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'strict', 'permissive')
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'strict':
        config['assembly']['min_overlap'] = 50
        config['assembly']['min_reads'] = 10
        config['assembly']['min_coverage'] = 5.0
        config['assembly']['min_length'] = 500

    elif template == 'permissive':
        config['assembly']['min_overlap'] = 1
        config['assembly']['min_reads'] = 1
        config['assembly']['min_coverage'] = 0.0
        config['assembly']['min_length'] = 1

    elif template != 'default':
        raise ValueError(f"Unknown configuration template: {template}")

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    assembly = config.get('assembly', {})

    min_overlap = assembly.get('min_overlap')
    if not isinstance(min_overlap, int) or isinstance(min_overlap, bool) or min_overlap < 1:
        errors.append(f"assembly.min_overlap must be an integer >= 1, got {min_overlap!r}")

    min_reads = assembly.get('min_reads')
    if not isinstance(min_reads, int) or isinstance(min_reads, bool) or min_reads < 0:
        errors.append(f"assembly.min_reads must be an integer >= 0, got {min_reads!r}")

    min_coverage = assembly.get('min_coverage')
    if not isinstance(min_coverage, (int, float)) or isinstance(min_coverage, bool) or min_coverage < 0:
        errors.append(f"assembly.min_coverage must be a number >= 0, got {min_coverage!r}")

    min_length = assembly.get('min_length')
    if not isinstance(min_length, int) or isinstance(min_length, bool) or min_length < 0:
        errors.append(f"assembly.min_length must be an integer >= 0, got {min_length!r}")

    level = config.get('output', {}).get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
