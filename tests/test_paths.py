"""
Unit Tests for the Path Model

Author: dirmirror Project
License: MIT
"""

import os
import pytest
from pathlib import Path

from dirmirror.core.paths import normalize_root, relative_id, join, is_within, depth


class TestNormalizeRoot:
    """Test suite for root normalization."""

    def test_appends_separator(self):
        assert normalize_root("/data/src") == "/data/src/"

    def test_keeps_existing_separator(self):
        assert normalize_root("/data/src/") == "/data/src/"
        assert normalize_root("/data/src" + os.sep) == "/data/src" + os.sep

    def test_accepts_path_objects(self, tmp_path):
        root = normalize_root(tmp_path)
        assert root.startswith(str(tmp_path))
        assert root.endswith(("/", os.sep))

    def test_empty_root_rejected(self):
        with pytest.raises(ValueError):
            normalize_root("")


class TestRelativeId:
    """Test suite for relative identifier computation."""

    def test_file_directly_under_root(self):
        assert relative_id("/data/src/", "/data/src/foo.txt") == "foo.txt"

    def test_nested_file(self):
        assert relative_id("/data/src/", "/data/src/a/b/foo.txt") == "a/b/foo.txt"

    def test_native_paths(self, tmp_path):
        root = normalize_root(tmp_path)
        location = os.path.join(str(tmp_path), "sub", "file.bin")
        assert relative_id(root, location) == "sub/file.bin"

    def test_same_relative_id_across_roots(self):
        """Entries of different trees compare by relative identity."""
        assert relative_id("/a/", "/a/x/y.txt") == relative_id("/b/c/", "/b/c/x/y.txt")

    def test_location_outside_root_rejected(self):
        with pytest.raises(ValueError):
            relative_id("/data/src/", "/data/other/foo.txt")

    def test_sibling_with_common_prefix_rejected(self):
        with pytest.raises(ValueError):
            relative_id("/data/src/", "/data/src2/foo.txt")

    def test_root_itself_rejected(self):
        with pytest.raises(ValueError):
            relative_id("/data/src/", "/data/src/")

    def test_join_round_trip(self):
        root = normalize_root("/data/target")
        assert join(root, "a/b.txt") == "/data/target/a/b.txt"
        assert relative_id(root, join(root, "a/b.txt")) == "a/b.txt"


class TestHelpers:
    """Test suite for relative identifier helpers."""

    def test_is_within(self):
        assert is_within("a/b", "a")
        assert is_within("a", "a")
        assert not is_within("ab", "a")
        assert not is_within("a", "a/b")

    def test_depth(self):
        assert depth("a") == 1
        assert depth("a/b/c") == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
