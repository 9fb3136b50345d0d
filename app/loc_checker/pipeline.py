"""End-to-end run: harvest, classify, allocate keys, plan, apply and persist."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .catalog.known_keys import KnownKeyCatalog, KnownKeySnapshot
from .classify.engine import ClassificationEngine, ContextWindow
from .classify.patterns import describe_ui_pattern
from .config.constants import SOURCE_SUFFIX, CallShape
from .config.settings import CheckerConfig, validate_config
from .exceptions import EditConflictError, ResourceFileError, SourceWriteError
from .harvest.harvester import LiteralHarvester
from .log_config import debug_verbose, verbose_log, warning_log
from .models.findings import Finding
from .models.occurrence import LiteralOccurrence
from .models.resource import KeyAssignment, ResourceEntry
from .models.verdict import Verdict
from .parsing.parser import ParseFailure
from .parsing.tree import SyntaxTree
from .resources.arb_store import ArbResourceStore
from .resources.key_manager import ResourceKeyManager
from .rewrite.applier import EditApplier, RewrittenFile
from .rewrite.edit_set import DroppedGroup
from .rewrite.extension import ensure_extension_file, extension_path
from .rewrite.planner import FilePlan, RewritePlanner


@dataclass
class FileAnalysis:
    path: Path
    relative_path: str
    text: str = ""
    tree: Optional[SyntaxTree] = None
    kept: List[Tuple[LiteralOccurrence, Verdict, ContextWindow]] = field(default_factory=list)
    skipped: int = 0
    failure: Optional[ParseFailure] = None


@dataclass
class PipelineResult:
    findings: List[Finding] = field(default_factory=list)
    new_entries: Tuple[ResourceEntry, ...] = ()
    assignments: Tuple[KeyAssignment, ...] = ()
    rewritten_files: List[RewrittenFile] = field(default_factory=list)
    parse_failures: List[Tuple[str, ParseFailure]] = field(default_factory=list)
    write_failures: List[Tuple[str, str]] = field(default_factory=list)
    dropped_groups: List[DroppedGroup] = field(default_factory=list)
    resource_written: bool = False
    extension_written: Optional[str] = None
    files_scanned: int = 0

    @property
    def edit_count(self) -> int:
        return sum(item.applied for item in self.rewritten_files)

    @property
    def written_files(self) -> List[RewrittenFile]:
        return [item for item in self.rewritten_files if item.written]


def iter_source_files(config: CheckerConfig) -> Iterator[Path]:
    """Yield ``*.dart`` files below the scan paths, sorted, minus exclusions."""

    excluded_dirs = tuple(item.strip("/") for item in config.exclude_dirs if item.strip("/"))
    seen: set[Path] = set()
    found: List[Path] = []
    for scan_path in config.scan_paths:
        if scan_path.is_file():
            candidates: List[Path] = [scan_path]
        else:
            candidates = []
            for directory, dirnames, filenames in os.walk(scan_path):
                current = Path(directory)
                dirnames[:] = sorted(
                    name
                    for name in dirnames
                    if not _is_excluded_dir(config.relative_path(current / name), excluded_dirs)
                )
                candidates.extend(
                    current / name for name in filenames if name.endswith(SOURCE_SUFFIX)
                )
        for candidate in candidates:
            relative = config.relative_path(candidate)
            if any(relative.endswith(suffix) for suffix in config.exclude_files if suffix):
                continue
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            found.append(candidate)
    yield from sorted(found, key=lambda item: config.relative_path(item))


def _is_excluded_dir(relative: str, excluded: Sequence[str]) -> bool:
    return any(relative == item or relative.startswith(f"{item}/") for item in excluded)


class LocalizationPipeline:
    """Runs every stage over the configured project.

    Harvesting and classification fan out over a bounded thread pool using
    only read-only inputs. Key allocation and planning run on the calling
    thread in (path, offset) order so key assignment is deterministic.
    Applying and writing fan out again, one file per task.
    """

    def __init__(
        self,
        config: CheckerConfig,
        *,
        snapshot: Optional[KnownKeySnapshot] = None,
        package_name: Optional[str] = None,
    ) -> None:
        validate_config(config)
        self._config = config
        self._snapshot = snapshot
        self._harvester = LiteralHarvester(include_comments=config.include_comments)
        self._engine = ClassificationEngine(config)
        self._store = ArbResourceStore(config.resource_path, config.locale)
        self._package_name = package_name

    @property
    def store(self) -> ArbResourceStore:
        return self._store

    def run(self) -> PipelineResult:
        config = self._config
        files = list(iter_source_files(config))
        snapshot = self._snapshot if self._snapshot is not None else KnownKeyCatalog(config).load()
        verbose_log(
            "pipeline_started",
            {
                "files": len(files),
                "known_keys": len(snapshot),
                "workers": config.max_workers,
                "dry_run": config.dry_run,
            },
        )
        result = PipelineResult(files_scanned=len(files))

        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            analyses = list(pool.map(lambda path: self._analyze(path, snapshot), files))

        for analysis in analyses:
            if analysis.failure is not None:
                result.parse_failures.append((analysis.relative_path, analysis.failure))
                continue
            for occurrence, verdict, window in analysis.kept:
                result.findings.append(self._finding(occurrence, verdict, window))

        key_manager = ResourceKeyManager(self._store.messages())
        planner = RewritePlanner(config, key_manager)
        plans: List[Tuple[FileAnalysis, FilePlan]] = []
        for analysis in analyses:
            if analysis.tree is None or not analysis.kept:
                continue
            occurrences = [occurrence for occurrence, _, _ in analysis.kept]
            plan = planner.plan_file(analysis.relative_path, analysis.tree, occurrences)
            result.dropped_groups.extend(plan.edit_set.dropped)
            if plan.has_edits:
                plans.append((analysis, plan))

        applier = EditApplier(config, self._package_name)
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            outcomes = list(pool.map(lambda item: self._apply(applier, *item), plans))
        for rewritten, error in outcomes:
            if rewritten is not None:
                result.rewritten_files.append(rewritten)
            if error is not None:
                result.write_failures.append(error)
        if any(CallShape.AMBIENT in plan.shapes for _, plan in plans):
            self._write_extension(applier, result)

        result.new_entries = key_manager.new_entries
        result.assignments = key_manager.assignments
        try:
            result.resource_written = self._store.write(result.new_entries, dry_run=config.dry_run)
        except (ResourceFileError, OSError) as exc:
            warning_log("write_failed", {"path": str(self._store.path), "error": str(exc)})
            result.write_failures.append((config.relative_path(self._store.path), str(exc)))

        verbose_log(
            "pipeline_finished",
            {
                "findings": len(result.findings),
                "new_entries": len(result.new_entries),
                "files_rewritten": len(result.written_files),
                "edits": result.edit_count,
                "parse_failures": len(result.parse_failures),
                "write_failures": len(result.write_failures),
            },
        )
        return result

    def _analyze(self, path: Path, snapshot: KnownKeySnapshot) -> FileAnalysis:
        config = self._config
        relative = config.relative_path(path)
        analysis = FileAnalysis(path=path, relative_path=relative)
        try:
            analysis.text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            warning_log("source_unreadable", {"path": relative, "error": str(exc)})
            analysis.failure = ParseFailure(f"Unreadable source: {exc}", 1, 1)
            return analysis
        harvested = self._harvester.harvest_text(relative, analysis.text)
        if harvested.tree is None:
            analysis.failure = harvested.failure
            return analysis
        analysis.tree = harvested.tree
        for occurrence in harvested.occurrences:
            window = ContextWindow.around(
                harvested.tree.line_index,
                occurrence.line,
                config.context_before,
                config.context_after,
            )
            verdict = self._engine.classify(occurrence, window, snapshot)
            if verdict.is_keep:
                analysis.kept.append((occurrence, verdict, window))
            else:
                analysis.skipped += 1
                debug_verbose(
                    "occurrence_skipped",
                    {"path": relative, "line": occurrence.line, "verdict": verdict.describe()},
                )
        return analysis

    @staticmethod
    def _finding(
        occurrence: LiteralOccurrence, verdict: Verdict, window: ContextWindow
    ) -> Finding:
        return Finding(
            file=occurrence.path,
            line=occurrence.line,
            column=occurrence.column,
            content=occurrence.content,
            context=window.lines,
            pattern=describe_ui_pattern(window.lines),
            reason=verdict.reason.value,
            rewritable=occurrence.is_rewritable,
        )

    def _write_extension(self, applier: EditApplier, result: PipelineResult) -> None:
        config = self._config
        try:
            written = ensure_extension_file(config, applier.package_name)
        except SourceWriteError as exc:
            target = extension_path(config, applier.package_name)
            relative = config.relative_path(target) if target is not None else config.ambient_import
            warning_log("write_failed", {"path": relative, "error": str(exc)})
            result.write_failures.append((relative, str(exc)))
            return
        if written is not None:
            result.extension_written = config.relative_path(written)

    def _apply(
        self, applier: EditApplier, analysis: FileAnalysis, plan: FilePlan
    ) -> Tuple[Optional[RewrittenFile], Optional[Tuple[str, str]]]:
        try:
            rewritten = applier.rewrite(analysis.path, analysis.text, plan)
        except EditConflictError as exc:
            warning_log("edit_apply_failed", {"path": analysis.relative_path, "error": str(exc)})
            return None, (analysis.relative_path, str(exc))
        try:
            return applier.write(rewritten), None
        except SourceWriteError as exc:
            warning_log("write_failed", {"path": analysis.relative_path, "error": str(exc)})
            return rewritten, (analysis.relative_path, str(exc))


def run_pipeline(config: CheckerConfig) -> PipelineResult:
    return LocalizationPipeline(config).run()


__all__ = [
    "FileAnalysis",
    "LocalizationPipeline",
    "PipelineResult",
    "iter_source_files",
    "run_pipeline",
]
