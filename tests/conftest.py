"""Shared helpers: parse specs from text, render them and load the result."""
from __future__ import annotations
import types
import unittest
from pathlib import Path

import pytest

from tighterror.backend.emit_python import render_unit
from tighterror.backend.modules import build_units
from tighterror.parser import parse_yaml_str
from tighterror.semantics.validator import validate

FIXTURES = Path(__file__).parent / "fixtures"


def spec_from_yaml(text: str):
    spec = parse_yaml_str(text)
    validate(spec)
    return spec


def generate_units(text: str, test: bool = True, separate_files: bool = False):
    """Render every output unit of a YAML spec into ``(name, source)`` pairs."""
    spec = spec_from_yaml(text)
    units = build_units(spec, test=test, separate_files=separate_files)
    return [(u.name, render_unit(u)) for u in units]


def exec_source(source: str, name: str = "generated_errors") -> types.ModuleType:
    module = types.ModuleType(name)
    exec(compile(source, f"<{name}>", "exec"), module.__dict__)
    return module


def load_module(text: str, test: bool = True) -> types.ModuleType:
    """Generate the single unit of a YAML spec and execute it."""
    units = generate_units(text, test=test)
    assert len(units) == 1
    name, source = units[0]
    return exec_source(source, name)


def run_embedded_tests(module: types.ModuleType) -> unittest.TestResult:
    suite = unittest.TestLoader().loadTestsFromModule(module)
    result = unittest.TestResult()
    suite.run(result)
    return result


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def spec_file(tmp_path):
    """Write a spec into a temporary directory and return its path."""
    def _write(text: str, name: str = "tighterror.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def generate():
    return generate_units


@pytest.fixture
def load():
    return load_module


@pytest.fixture
def run_embedded():
    return run_embedded_tests
