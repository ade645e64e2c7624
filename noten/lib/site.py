"""Site builder - runs the processor over every stale document of a project."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from noten.lib.config import FILENAME, NotenConfig, load_config
from noten.lib.deps import DependencyStore, store_path
from noten.lib.errors import NotenError
from noten.lib.generators import GeneratorRunner
from noten.lib.process import process
from noten.lib.skeleton import Skeleton
from noten.lib.staleness import dependency_mtimes, mtime, needs_rebuild, tool_mtime

log = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


@dataclass
class BuildReport:
    """Outcome of one build."""

    built: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def output_path(config: NotenConfig, document: Path) -> Path:
    return config.output_dir / f"{document.stem}.html"


class SiteBuilder:
    """Builds all documents of one project, one at a time."""

    def __init__(
        self,
        root: Path,
        config: Optional[NotenConfig] = None,
        runner: Optional[GeneratorRunner] = None,
        force: bool = False,
    ):
        self.root = root
        self.config_path = root / FILENAME
        self.config = config or load_config(self.config_path)
        self.runner = runner
        self.force = force
        self.deps_path = store_path(root)

    def _is_stale(
        self,
        document: Path,
        out: Path,
        references: tuple[float, float, float],
        deps: DependencyStore,
    ) -> bool:
        if self.force:
            return True
        tool, config, skeleton = references
        return needs_rebuild(
            doc_mtime=document.stat().st_mtime,
            output_mtime=mtime(out),
            tool_mtime=tool,
            config_mtime=config,
            skeleton_mtime=skeleton,
            dependency_mtimes=dependency_mtimes(deps.get_deps(document)),
        )

    def build_document(
        self, document: Path, skeleton: Skeleton, deps: DependencyStore
    ) -> Path:
        """Process one document and write its page. Returns the output path."""
        out = output_path(self.config, document)
        text = document.read_text(encoding="utf-8")
        rendered = process(
            text,
            document_path=document,
            config=self.config,
            skeleton=skeleton,
            deps=deps,
            runner=self.runner,
        )
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(rendered, encoding="utf-8")
        index = self.config.output_dir / INDEX_FILENAME
        if document.stem == self.config.index_id and out != index:
            shutil.copyfile(out, index)
        return out

    def build(self) -> BuildReport:
        """Run an incremental build.

        Per-document errors are logged and recorded; errors that abort the run
        propagate without persisting the dependency store.
        """
        report = BuildReport()
        skeleton, skeleton_mtime = Skeleton.parse_file(self.config.skeleton_path)
        deps = DependencyStore.load(self.deps_path)
        references = (tool_mtime(), mtime(self.config_path) or 0.0, skeleton_mtime)

        try:
            documents = sorted(p for p in self.config.input_dir.iterdir() if p.is_file())
        except OSError as e:
            raise NotenError(
                f"Failed to read input directory {self.config.input_dir}: {e}"
            ) from e

        for document in documents:
            out = output_path(self.config, document)
            log.debug(f"Checking up-to-dateness of {document}")
            if not self._is_stale(document, out, references, deps):
                log.info(f"{document} is up to date")
                report.skipped.append(document)
                continue

            log.info(f"Processing {document}")
            try:
                self.build_document(document, skeleton, deps)
            except NotenError as e:
                if e.aborts_run:
                    raise
                log.error(f"Failed to process template {document}: {e}")
                report.failed[document] = str(e)
            except (OSError, UnicodeDecodeError) as e:
                log.error(f"Failed to process template {document}: {e}")
                report.failed[document] = str(e)
            else:
                report.built.append(document)

        deps.save(self.deps_path)
        return report


def build_site(
    root: Path, force: bool = False, runner: Optional[GeneratorRunner] = None
) -> BuildReport:
    """Build the project rooted at `root`."""
    return SiteBuilder(root, runner=runner, force=force).build()
