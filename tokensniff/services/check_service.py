"""Check service for running the rules over files and directories."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from tokensniff.config import SnifferConfig
from tokensniff.constants import MAX_FILE_SIZE, utcnow
from tokensniff.engine import RuleEngine
from tokensniff.rules.base import Finding
from tokensniff.rules.registry import build_rules
from tokensniff.tokens.cache import TokenCache
from tokensniff.tokens.orchestrator import TokenizerOrchestrator
from tokensniff.types.errors import (
    ErrorCode,
    ErrorContext,
    ResourceError,
    TokenSniffError,
)
from tokensniff.utils.logger import logger


def read_error(file_path: str, error: OSError, operation: str = "check_file") -> ResourceError:
    """Wrap an OSError raised while reading ``file_path``."""
    code = ErrorCode.PERMISSION_DENIED if isinstance(error, PermissionError) else ErrorCode.FILE_READ_FAILED
    return ResourceError(
        f"Cannot read {file_path}: {error}",
        user_message=f"Could not read {file_path}.",
        context=ErrorContext(
            operation=operation,
            file_path=file_path,
            component="check_service",
        ),
        original_error=error,
        code=code,
    )


@dataclass
class FileResult:
    """Outcome of checking a single file."""

    file_path: str
    findings: list[Finding] = field(default_factory=list)
    error: TokenSniffError | None = None
    skipped: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "file_path": self.file_path,
            "findings": [f.to_dict() for f in self.findings],
            "error": self.error.to_dict() if self.error else None,
            "skipped": self.skipped,
        }


@dataclass
class CheckReport:
    """Result of a check run."""

    findings: list[Finding] = field(default_factory=list)
    errors: list[TokenSniffError] = field(default_factory=list)
    files_checked: int = 0
    files_skipped: int = 0
    started_at: datetime = field(default_factory=utcnow)
    time_elapsed_ms: int = 0

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def add(self, result: FileResult) -> None:
        """Merge one file's result into the report."""
        if result.skipped:
            self.files_skipped += 1
            return
        if result.error is not None:
            self.errors.append(result.error)
            return
        self.files_checked += 1
        self.findings.extend(result.findings)

    def by_rule(self) -> dict[str, list[Finding]]:
        """Findings grouped by rule name."""
        grouped: dict[str, list[Finding]] = defaultdict(list)
        for finding in self.findings:
            grouped[finding.rule_name].append(finding)
        return dict(grouped)

    def by_file(self) -> dict[str, list[Finding]]:
        """Findings grouped by file path."""
        grouped: dict[str, list[Finding]] = defaultdict(list)
        for finding in self.findings:
            grouped[finding.file_path].append(finding)
        return dict(grouped)

    def summary(self) -> str:
        """One-line human readable summary."""
        files = "file" if self.files_checked == 1 else "files"
        parts = [f"{len(self.findings)} finding(s) in {self.files_checked} {files}"]
        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")
        if self.files_skipped:
            parts.append(f"{self.files_skipped} skipped")
        return ", ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "files_checked": self.files_checked,
            "findings": [f.to_dict() for f in self.findings],
            "errors": [e.to_dict() for e in self.errors],
        }


class CheckService:
    """Service for running configured rules over PHP files.

    Provides:
    - File discovery (glob patterns, ignored directories, size limit)
    - Tokenizing through the configured backend with fallback
    - Rule execution, one analysis session per file
    - Optional parallel workers (``config.jobs``)
    """

    def __init__(
        self,
        config: SnifferConfig | None = None,
        cache: TokenCache | None = None,
    ):
        """Initialize check service.

        Args:
            config: Settings for the run (defaults when omitted)
            cache: Optional token cache shared across runs
        """
        self._config = config or SnifferConfig()
        self._cache = cache or TokenCache()
        self._engine = RuleEngine(build_rules(self._config))
        self._local = threading.local()

    @property
    def config(self) -> SnifferConfig:
        """Get active configuration."""
        return self._config

    @property
    def engine(self) -> RuleEngine:
        """Get rule engine."""
        return self._engine

    def _orchestrator(self) -> TokenizerOrchestrator:
        """Per-thread orchestrator; parsers are not shared between workers."""
        orchestrator = getattr(self._local, "orchestrator", None)
        if orchestrator is None:
            orchestrator = TokenizerOrchestrator(
                preferred=self._config.tokenizer, cache=self._cache
            )
            self._local.orchestrator = orchestrator
        return orchestrator

    # ================================================================
    # Discovery
    # ================================================================

    def collect_files(self, paths: Iterable[str | Path]) -> tuple[list[Path], list[TokenSniffError]]:
        """Expand ``paths`` into the files to check.

        Files named explicitly are always included. Directories are
        expanded with the configured glob patterns, skipping ignored
        directory names.

        Returns:
            Tuple of (files in sorted order per argument, errors for
            paths that do not exist).
        """
        files: list[Path] = []
        errors: list[TokenSniffError] = []
        seen: set[Path] = set()
        ignored = set(self._config.ignored)

        for raw in paths:
            path = Path(raw)
            if path.is_file():
                candidates = [path]
            elif path.is_dir():
                candidates = sorted(
                    {
                        match
                        for pattern in self._config.patterns
                        for match in path.glob(pattern)
                        if match.is_file()
                        and not ignored.intersection(match.relative_to(path).parts[:-1])
                    }
                )
            else:
                errors.append(
                    ResourceError(
                        f"Path not found: {path}",
                        user_message=f"Path does not exist: {path}",
                        context=ErrorContext(
                            operation="collect_files",
                            file_path=str(path),
                            component="check_service",
                        ),
                        code=ErrorCode.FILE_NOT_FOUND,
                    )
                )
                continue

            for candidate in candidates:
                key = candidate.resolve()
                if key not in seen:
                    seen.add(key)
                    files.append(candidate)

        return files, errors

    # ================================================================
    # Checking
    # ================================================================

    def check_source(self, content: str, file_path: str = "<source>") -> list[Finding]:
        """Check source text directly.

        Raises:
            TokenizeError: If no tokenizer backend could handle the text.
        """
        stream = self._orchestrator().tokenize(content, file_path)
        return self._engine.check(stream, file_path)

    def check_file(self, path: str | Path) -> FileResult:
        """Check a single file. Failures are returned, never raised."""
        file_path = str(path)
        target = Path(path)

        try:
            size = target.stat().st_size
        except OSError as e:
            return FileResult(file_path, error=read_error(file_path, e))

        if size > MAX_FILE_SIZE:
            logger.debug("Skipping {} ({} bytes > {})", file_path, size, MAX_FILE_SIZE)
            return FileResult(file_path, skipped=True)

        try:
            content = target.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            return FileResult(file_path, error=read_error(file_path, e))

        try:
            findings = self.check_source(content, file_path)
        except TokenSniffError as e:
            logger.warning("Could not check {}: {}", file_path, e)
            return FileResult(file_path, error=e)

        return FileResult(file_path, findings=findings)

    def check_paths(self, paths: Iterable[str | Path]) -> CheckReport:
        """Check every file under ``paths``.

        Args:
            paths: Files and directories.

        Returns:
            Report with findings in file order, then discovery order.
        """
        start_time = utcnow()
        report = CheckReport(started_at=start_time)
        files, errors = self.collect_files(paths)
        report.errors.extend(errors)

        jobs = max(1, self._config.jobs)
        if jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                results = list(executor.map(self.check_file, files))
        else:
            results = [self.check_file(f) for f in files]

        for result in results:
            report.add(result)

        report.time_elapsed_ms = int((utcnow() - start_time).total_seconds() * 1000)
        logger.info("Check finished: {}", report.summary())
        return report

    def stats(self) -> dict[str, Any]:
        """Token cache statistics."""
        return self._cache.stats
