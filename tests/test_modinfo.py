"""Tests for descriptor parsing and the ModuleDescriptor value type."""

import sys
from pathlib import Path

import pytest

# Ensure the locus package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from conftest import unified
from locus.modinfo import (
    ModinfoParseError,
    ModuleDescriptor,
    modinfo_filename,
    parse_modinfo,
)


class TestParseModinfo:
    def test_key_values(self):
        assert parse_modinfo("name=foo\nversion = 1.2 \n") == {"name": "foo", "version": "1.2"}

    def test_comments_and_blank_lines(self):
        text = "# header\n\nname=foo\n   # indented comment\n"
        assert parse_modinfo(text) == {"name": "foo"}

    def test_value_may_contain_equals(self):
        assert parse_modinfo("flags=a=b") == {"flags": "a=b"}

    def test_empty_value(self):
        assert parse_modinfo("description=") == {"description": ""}

    def test_duplicate_key_last_wins(self):
        assert parse_modinfo("a=1\na=2") == {"a": "2"}

    def test_missing_separator(self):
        with pytest.raises(ModinfoParseError, match="Line 2"):
            parse_modinfo("name=foo\njust some text\n")

    def test_empty_key(self):
        with pytest.raises(ModinfoParseError):
            parse_modinfo("=value")

    def test_parse_error_is_value_error(self):
        assert issubclass(ModinfoParseError, ValueError)


class TestModuleDescriptor:
    def test_filename(self):
        assert modinfo_filename("foo") == "foo.modinfo"

    def test_new_descriptor_is_empty(self):
        descriptor = ModuleDescriptor()
        assert descriptor.empty()
        assert not descriptor
        assert len(descriptor) == 0
        assert descriptor.base_dir == ""

    def test_values_and_defaults(self):
        descriptor = ModuleDescriptor({"name": "foo"}, "C:\\mods\\foo\\")
        assert descriptor.value("name") == "foo"
        assert descriptor.value("missing") == ""
        assert descriptor.value("missing", "x") == "x"
        assert "name" in descriptor
        assert descriptor.base_dir == "C:/mods/foo"

    def test_values_is_a_copy(self):
        descriptor = ModuleDescriptor({"a": "1"})
        descriptor.values["a"] = "changed"
        assert descriptor.value("a") == "1"

    def test_set_value(self):
        descriptor = ModuleDescriptor()
        descriptor.set_value("a", "1")
        assert not descriptor.empty()

    def test_load(self, tmp_path):
        path = tmp_path / "foo.modinfo"
        path.write_text("name=foo\ndataPath=${ModulePath}/data\n", encoding="utf-8")
        descriptor = ModuleDescriptor()
        assert descriptor.load(path) is True
        assert descriptor.base_dir == unified(tmp_path)
        assert descriptor.value("dataPath") == unified(tmp_path) + "/data"

    def test_load_missing_file(self, tmp_path):
        descriptor = ModuleDescriptor({"stale": "1"}, "/old")
        assert descriptor.load(tmp_path / "nope.modinfo") is False
        assert descriptor.empty()
        assert descriptor.base_dir == ""

    def test_load_malformed_file(self, tmp_path):
        path = tmp_path / "bad.modinfo"
        path.write_text("this is not a descriptor\n", encoding="utf-8")
        descriptor = ModuleDescriptor()
        assert descriptor.load(path) is False
        assert descriptor.empty()

    def test_load_binary_file(self, tmp_path):
        path = tmp_path / "bin.modinfo"
        path.write_bytes(b"\xff\xfe\x00garbage")
        assert ModuleDescriptor().load(path) is False

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "foo.modinfo"
        original = ModuleDescriptor({"version": "2", "name": "foo"})
        assert original.save(path) is True
        assert path.read_text(encoding="utf-8") == "name=foo\nversion=2\n"

        loaded = ModuleDescriptor()
        loaded.load(path)
        assert loaded.values == original.values

    def test_save_to_missing_directory(self, tmp_path):
        assert ModuleDescriptor({"a": "1"}).save(tmp_path / "no" / "dir.modinfo") is False

    def test_format(self):
        descriptor = ModuleDescriptor({"name": "foo", "version": "1.0"}, "/opt/foo")
        text = descriptor.format()
        assert text.splitlines()[0] == "base_dir: /opt/foo"
        assert "name    = foo" in text
        assert "version = 1.0" in text

    def test_format_empty(self):
        assert ModuleDescriptor().format() == "(empty)"

    def test_equality(self):
        assert ModuleDescriptor({"a": "1"}, "/x") == ModuleDescriptor({"a": "1"}, "/x/")
        assert ModuleDescriptor({"a": "1"}, "/x") != ModuleDescriptor({"a": "1"}, "/y")
