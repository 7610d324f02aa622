"""Tests for ExcludeFilter and its effect on sync_dirs."""

import pytest

from dirsync import ExcludeFilter, sync_dirs, sync_dirs_dry_run


def _touch(path, data="x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data)
    return path


# ---------------------------------------------------------------------------
# Unit tests for ExcludeFilter
# ---------------------------------------------------------------------------

class TestExcludeFilter:
    def test_no_patterns_not_active(self):
        ef = ExcludeFilter()
        assert ef.active is False
        assert ef.is_excluded("anything") is False

    def test_exclude_pattern_match(self):
        ef = ExcludeFilter(patterns=["*.pyc"])
        assert ef.active is True
        assert ef.is_excluded("foo.pyc") is True
        assert ef.is_excluded("sub/bar.pyc") is True

    def test_exclude_pattern_no_match(self):
        ef = ExcludeFilter(patterns=["*.pyc"])
        assert ef.is_excluded("foo.py") is False

    def test_exclude_directory_pattern(self):
        ef = ExcludeFilter(patterns=["build/"])
        assert ef.is_excluded("build", is_dir=True) is True
        # A file named "build" should not be matched by "build/"
        assert ef.is_excluded("build", is_dir=False) is False

    def test_negation_pattern(self):
        ef = ExcludeFilter(patterns=["*.pyc", "!important.pyc"])
        assert ef.is_excluded("foo.pyc") is True
        assert ef.is_excluded("important.pyc") is False

    def test_anchored_pattern(self):
        ef = ExcludeFilter(patterns=["/build"])
        assert ef.is_excluded("build") is True
        assert ef.is_excluded("src/build") is False

    def test_exclude_from_file(self, tmp_path):
        pfile = tmp_path / "excludes.txt"
        pfile.write_text("*.log\n# comment\n\n__pycache__/\n")
        ef = ExcludeFilter(exclude_from=str(pfile))
        assert ef.active is True
        assert ef.is_excluded("app.log") is True
        assert ef.is_excluded("__pycache__", is_dir=True) is True
        assert ef.is_excluded("app.py") is False

    def test_patterns_and_file_combined(self, tmp_path):
        pfile = tmp_path / "excludes.txt"
        pfile.write_text("*.log\n")
        ef = ExcludeFilter(patterns=["*.tmp"], exclude_from=str(pfile))
        assert ef.is_excluded("a.log") is True
        assert ef.is_excluded("a.tmp") is True

    def test_missing_exclude_from(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ExcludeFilter(exclude_from=str(tmp_path / "nope.txt"))


# ---------------------------------------------------------------------------
# Exclusion during sync
# ---------------------------------------------------------------------------

class TestSyncWithExclude:
    def test_excluded_source_files_not_copied(self, src, dst):
        _touch(src / "app.py")
        _touch(src / "debug.log")
        report = sync_dirs(src, dst, exclude=ExcludeFilter(patterns=["*.log"]))
        assert (dst / "app.py").exists()
        assert not (dst / "debug.log").exists()
        assert report.add == ["app.py"]

    def test_excluded_source_directory_skipped(self, src, dst):
        _touch(src / "node_modules" / "pkg" / "index.js")
        _touch(src / "main.js")
        sync_dirs(src, dst, exclude=ExcludeFilter(patterns=["node_modules/"]))
        assert not (dst / "node_modules").exists()
        assert (dst / "main.js").exists()

    def test_excluded_destination_files_not_deleted(self, src, dst):
        _touch(dst / "cache.log")
        _touch(dst / "orphan.txt")
        report = sync_dirs(src, dst, delete_missing=True,
                           exclude=ExcludeFilter(patterns=["*.log"]))
        assert (dst / "cache.log").exists()
        assert not (dst / "orphan.txt").exists()
        assert report.delete == ["orphan.txt"]

    def test_directory_holding_excluded_content_kept(self, src, dst):
        _touch(dst / "logs" / "app.log")
        _touch(dst / "logs" / "old.txt")
        report = sync_dirs(src, dst, delete_missing=True,
                           exclude=ExcludeFilter(patterns=["*.log"]))
        assert (dst / "logs" / "app.log").exists()
        assert not (dst / "logs" / "old.txt").exists()
        assert report.delete == ["logs/old.txt"]

    def test_dry_run_honours_exclude(self, src, dst):
        _touch(src / "a.txt")
        _touch(src / "b.tmp")
        _touch(dst / "c.tmp")
        report = sync_dirs_dry_run(src, dst, delete_missing=True,
                                   exclude=ExcludeFilter(patterns=["*.tmp"]))
        assert report.add == ["a.txt"]
        assert report.delete == []

    def test_source_file_does_not_replace_directory_with_excluded_content(self, src, dst):
        _touch(src / "a", "new")
        _touch(dst / "a" / "keep.tmp", "precious")
        report = sync_dirs(src, dst, delete_missing=True,
                           exclude=ExcludeFilter(patterns=["*.tmp"]))
        assert (dst / "a" / "keep.tmp").read_text() == "precious"
        assert [(w.path, w.error) for w in report.warnings] == [
            ("a", "destination directory holds excluded entries")]
        assert report.update == []
        assert report.delete == []

    def test_source_file_blocked_by_excluded_directory(self, src, dst):
        _touch(src / "build", "artifact")
        _touch(dst / "build" / "out.o")
        report = sync_dirs(src, dst, exclude=ExcludeFilter(patterns=["build/"]))
        assert (dst / "build").is_dir()
        assert (dst / "build" / "out.o").exists()
        assert [w.path for w in report.warnings] == ["build"]
        assert report.add == []

    def test_source_directory_blocked_by_excluded_file(self, src, dst):
        _touch(src / "data" / "a.txt")
        _touch(dst / "data", "not a directory")
        report = sync_dirs(src, dst, exclude=_ExcludeFilesNamed("data"))
        assert (dst / "data").read_text() == "not a directory"
        assert [(w.path, w.error) for w in report.warnings] == [
            ("data", "excluded entry at destination blocks directory")]
        assert report.mkdir == []
        assert report.add == []

    def test_dry_run_reports_same_warnings(self, src, dst):
        _touch(src / "build", "artifact")
        _touch(src / "a", "new")
        _touch(dst / "build" / "out.o")
        _touch(dst / "a" / "keep.tmp")
        excl = ExcludeFilter(patterns=["build/", "*.tmp"])
        planned = sync_dirs_dry_run(src, dst, delete_missing=True, exclude=excl)
        report = sync_dirs(src, dst, delete_missing=True, exclude=excl)
        assert planned == report
        assert [w.path for w in report.warnings] == ["a", "build"]


class _ExcludeFilesNamed:
    """Excludes regular files at one path while letting directories through."""

    def __init__(self, name):
        self.name = name

    def is_excluded(self, rel_path, *, is_dir=False):
        return not is_dir and rel_path == self.name
