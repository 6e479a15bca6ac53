#!/usr/bin/env python3
import sys
import subprocess
from pathlib import Path
from typing import List, Optional, Any, Dict

import yaml

from masteryls.lint.corpus import SCOPES
from masteryls.log_utils import bool_true, log


class ConfigError(RuntimeError):
    pass

# Check if params.yaml exists and log its status
def check_yaml_config(params_path: Path) -> bool:
    if params_path.exists():
        log('info', f"Found YAML config file: {params_path}")
        return True
    else:
        log('info', f"YAML config file not found: {params_path} (using defaults)")
        return False

# Read config params
def load_yaml(params_path: Path) -> Dict[str, Any]:
    if not params_path.exists():
        return {}
    log('info', f"Loading YAML params from: {params_path}")
    try:
        data = yaml.safe_load(params_path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {params_path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError('Invalid YAML structure: expected a top-level mapping')
    return data

def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    s = cfg.get(name) or {}
    if not isinstance(s, dict):
        raise ConfigError(f"Section '{name}' in params.yaml must be a mapping")
    return s

def _str_list(v: Any, key: str) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    if isinstance(v, list):
        return [str(x) for x in v]
    raise ConfigError(f"'{key}' must be a string or a list of strings")

def _scope(v: Any) -> str:
    scope = str(v or 'corpus').lower()
    if scope not in SCOPES:
        raise ConfigError(f"scope must be one of {', '.join(SCOPES)}, got '{scope}'")
    return scope

# Lint section with defaults
def get_lint(cfg: Dict[str, Any]) -> Dict[str, Any]:
    b = _section(cfg, 'lint')
    out: Dict[str, Any] = {
        'enabled': bool_true(b.get('enabled', 'true')),
        'paths': _str_list(b.get('paths', ['.']), 'lint.paths'),
        'scope': _scope(b.get('scope')),
        'pattern': str(b.get('pattern', '*.md')),
        'exclude': _str_list(b.get('exclude'), 'lint.exclude'),
        'format': str(b.get('format', 'text')),
        'out': str(b['out']) if b.get('out') else None,
        'force': bool_true(b.get('force', 'false')),
    }
    if out['format'] not in ('text', 'json'):
        raise ConfigError(f"lint.format must be 'text' or 'json', got '{out['format']}'")
    if not out['paths']:
        raise ConfigError("Missing key 'paths' in lint")
    for k, v in out.items():
        log('debug', f"lint[{k}] = {v}")
    return out

# Export section: output files are required
def get_export(cfg: Dict[str, Any]) -> Dict[str, Any]:
    b = _section(cfg, 'export')
    # Without an export section fall back to the usual file names
    if 'export' not in cfg:
        b = {'quiz': 'quiz.json', 'answers': 'answer_key.json'}
    must = ['quiz', 'answers']
    out: Dict[str, Any] = {}
    for k in must:
        if k not in b:
            raise ConfigError(f"Missing key '{k}' in export")
        out[k] = str(b[k])
    out['paths'] = _str_list(b.get('paths', ['.']), 'export.paths')
    out['scope'] = _scope(b.get('scope'))
    out['pattern'] = str(b.get('pattern', '*.md'))
    out['exclude'] = _str_list(b.get('exclude'), 'export.exclude')
    out['strict'] = bool_true(b.get('strict', 'false'))
    out['force'] = bool_true(b.get('force', 'false'))
    for k, v in out.items():
        log('debug', f"export[{k}] = {v}")
    return out

def lint_args(lv: Dict[str, Any], paths: Optional[List[str]] = None) -> List[str]:
    args = ['-m', 'masteryls.lint.lint_quizzes', *(paths or lv['paths'])]
    args += ['--scope', lv['scope'], '--pattern', lv['pattern'], '--format', lv['format']]
    if lv['exclude']:
        args += ['--exclude', *lv['exclude']]
    if lv['out']:
        args += ['--out', lv['out']]
    if lv['force']:
        args.append('--force')
    return args

def export_args(ev: Dict[str, Any], paths: Optional[List[str]] = None) -> List[str]:
    args = ['-m', 'masteryls.quiz.export_quiz_json', *(paths or ev['paths'])]
    args += ['--quiz', ev['quiz'], '--answers', ev['answers']]
    args += ['--scope', ev['scope'], '--pattern', ev['pattern']]
    if ev['exclude']:
        args += ['--exclude', *ev['exclude']]
    if ev['strict']:
        args.append('--strict')
    if ev['force']:
        args.append('--force')
    return args

# Dispatch based on subcommand
def dispatch(argv: List[str], params_path: Optional[Path] = None) -> int:
    log('debug', f"Entered dispatch with argv: {argv}")
    if not argv:
        log('warn', 'No subcommand provided (expected: lint, export).')
        return 2

    params_path = params_path or Path.cwd() / 'params.yaml'
    check_yaml_config(params_path)
    sub, extra_paths = argv[0].lower(), argv[1:]
    try:
        cfg = load_yaml(params_path)
        if sub == 'lint':
            lv = get_lint(cfg)
            if not lv['enabled']:
                log('info', 'Linting disabled in params.yaml (lint.enabled: false)')
                return 0
            cmd = [sys.executable, *lint_args(lv, extra_paths)]
        elif sub == 'export':
            cmd = [sys.executable, *export_args(get_export(cfg), extra_paths)]
        else:
            log('error', f"Unknown subcommand: {sub}")
            return 2
    except ConfigError as e:
        log('error', str(e))
        return 1
    log('info', f"Executing command: {' '.join(cmd)}")
    return subprocess.run(cmd).returncode

def run() -> None:
    raise SystemExit(dispatch(sys.argv[1:]))

if __name__ == "__main__":
    run()
