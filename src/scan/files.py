"""File scanning utilities for source files and snapshot stores."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from store.models import STORE_DIRNAME, STORE_FILENAME

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from pathlib import Path

SOURCE_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".mjs", ".cjs")
DEFAULT_EXCLUDE_PATTERNS = ("node_modules/*", "*/node_modules/*")


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: Iterable[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    rel_path_str = rel_path.as_posix()

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    if include_patterns and not any(
        fnmatch(rel_path_str, pat) for pat in include_patterns
    ):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {path for path in gitignore_paths if path.is_file()}
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = [
        path for path in _iter_gitignore_files(root) if not path.is_symlink()
    ]
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def _sorted_relative(paths: list[Path], directory: Path) -> list[Path]:
    return sorted(paths, key=lambda p: p.relative_to(directory).as_posix())


def find_source_files(
    directory: Path,
    *,
    extensions: Iterable[str] = SOURCE_EXTENSIONS,
    include_patterns: list[str] | None = None,
    exclude_patterns: Iterable[str] | None = DEFAULT_EXCLUDE_PATTERNS,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find TS/JS source files in a directory, respecting .gitignore.

    Args:
        directory: Directory to search
        extensions: File suffixes to accept (e.g. ".ts")
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded

    Yields:
        Path objects sorted lexicographically by relative path.
    """
    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
    )
    suffixes = frozenset(extensions)

    matched_files = [
        path
        for path in directory.rglob("*")
        if path.suffix in suffixes
        and _should_include_file(
            path,
            directory,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        )
    ]

    yield from _sorted_relative(matched_files, directory)


def find_store_files(
    directory: Path,
    *,
    exclude_patterns: Iterable[str] | None = DEFAULT_EXCLUDE_PATTERNS,
) -> list[Path]:
    """Find every ``.functions/cache.json`` under a directory.

    Stores are usually gitignored, so .gitignore rules are not applied here.
    """
    matched_files = [
        path
        for path in directory.rglob(STORE_FILENAME)
        if path.parent.name == STORE_DIRNAME
        and _should_include_file(path, directory, None, None, exclude_patterns)
    ]
    return _sorted_relative(matched_files, directory)


__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "SOURCE_EXTENSIONS",
    "_should_include_file",
    "find_source_files",
    "find_store_files",
]
