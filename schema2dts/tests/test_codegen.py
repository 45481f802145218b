"""Tests for the Codegen entry point and declaration file writing."""

import json

import pytest

from schema2dts.codegen.codegen import Codegen
from schema2dts.codegen.file_writer import DeclarationFileWriter
from schema2dts.codegen.schema_loader import DocumentLoader
from schema2dts.config import GeneratorConfig
from schema2dts.exceptions import OutputError
from schema2dts.tests.fixtures import SIMPLE_SCHEMA


class TestCodegen:
    """Test a complete generation run."""

    def test_returns_text_without_output(self, tmp_path):
        """Test nothing is written when no output is configured."""
        (tmp_path / 'simple.json').write_text(json.dumps(SIMPLE_SCHEMA))
        config = GeneratorConfig(sources=['simple.json'])

        text = Codegen(config, loader=DocumentLoader(base_path=tmp_path)).generate()

        assert text.startswith('declare interface Simple {')
        assert list(tmp_path.iterdir()) == [tmp_path / 'simple.json']

    def test_writes_configured_output(self, tmp_path):
        """Test the declarations are written to the output path."""
        (tmp_path / 'simple.json').write_text(json.dumps(SIMPLE_SCHEMA))
        output = tmp_path / 'out' / 'simple.d.ts'
        config = GeneratorConfig(
            sources=[str(tmp_path / 'simple.json')], output=str(output), indent='\t'
        )

        text = Codegen(config).generate()

        assert output.read_text() == text
        assert '\tname: string;' in text

    def test_type_reduction_setting(self, tmp_path):
        """Test the configured reduction reaches the normalizer."""
        (tmp_path / 'n.json').write_text(
            json.dumps({'id': '/n', 'type': ['integer', 'number']})
        )
        loader = DocumentLoader(base_path=tmp_path)

        merged = Codegen(GeneratorConfig(sources=['n.json']), loader=loader)
        distinct = Codegen(
            GeneratorConfig(sources=['n.json'], type_reduction='distinct'),
            loader=loader,
        )

        assert merged.generate() == 'declare type N = number;\n'
        assert distinct.generate() == 'declare type N = number | number;\n'


class TestDeclarationFileWriter:
    """Test writing declaration files."""

    def test_creates_parent_directories(self, tmp_path):
        """Test missing directories are created."""
        path = tmp_path / 'a' / 'b' / 'types.d.ts'
        DeclarationFileWriter().write('declare type Id = string;\n', path)
        assert path.read_text() == 'declare type Id = string;\n'

    def test_unwritable_path(self, tmp_path):
        """Test OS errors become OutputError."""
        (tmp_path / 'file').write_text('')
        with pytest.raises(OutputError):
            DeclarationFileWriter().write('', tmp_path / 'file' / 'types.d.ts')
