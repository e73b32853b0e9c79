from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import List

import yaml

from memhier.arch import MemoryHierarchy
from memhier.config import HierarchyConfig
from memhier.entity.model import Instruction
from memhier.entity.report import HierarchyReport
from memhier.parser import parse_kernel, parse_kernel_file
from memhier.utils.config_utils import load_config

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Artifacts produced by one replay of a kernel."""

    report: HierarchyReport
    hierarchy: MemoryHierarchy
    report_path: Path | None = None
    output_dir: Path | None = None


class SimulationPipeline:
    """
    Parse → replay → report.

    Every run builds a fresh :class:`MemoryHierarchy` from the same config, so
    consecutive runs never share cache or scratchpad state.
    """

    def __init__(self, config: str | Path | HierarchyConfig | None = None, output_root: str | Path | None = None):
        if config is None:
            config = HierarchyConfig()
        elif not isinstance(config, HierarchyConfig):
            config = load_config(str(config), HierarchyConfig)
        self.config = config.validate()

        self.output_root = Path(output_root) if output_root is not None else None
        if self.output_root is not None:
            self.output_root.mkdir(parents=True, exist_ok=True)

    def run_instructions(self, instructions: List[Instruction], name: str = "kernel") -> SimulationResult:
        return self._run(instructions, [], name)

    def run_kernel(self, kernel_code: str, name: str = "kernel") -> SimulationResult:
        instructions, diagnostics = parse_kernel(kernel_code)
        return self._run(instructions, diagnostics, name)

    def run_kernel_file(self, path: str | Path) -> SimulationResult:
        instructions, diagnostics = parse_kernel_file(path)
        return self._run(instructions, diagnostics, Path(path).stem)

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    def _run(self, instructions, diagnostics, name: str) -> SimulationResult:
        case_dir = None
        log_handler = None
        root_level = logging.getLogger().level
        if self.output_root is not None:
            case_dir = self.output_root / f"{name}_{self.config.name}"
            case_dir.mkdir(parents=True, exist_ok=True)
            log_handler = self._attach_file_logging(case_dir)

        try:
            hierarchy = MemoryHierarchy(self.config)
            for instruction in instructions:
                hierarchy.process(instruction)
            report = hierarchy.report(diagnostics)
            logger.info("%s: %s", name, ", ".join(report.summary_lines()))

            report_path = None
            if case_dir is not None:
                report_path = case_dir / "report.yaml"
                with open(report_path, "w") as f:
                    yaml.safe_dump(report.to_dict(), f, sort_keys=False)
        finally:
            if log_handler is not None:
                self._detach_file_logging(log_handler, root_level)

        return SimulationResult(
            report=report,
            hierarchy=hierarchy,
            report_path=report_path,
            output_dir=case_dir,
        )

    def _attach_file_logging(self, case_dir: Path) -> logging.FileHandler:
        """Attach a file handler under the case directory to capture INFO logs of one run."""
        log_path = case_dir / "memhier.log"
        root = logging.getLogger()
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
        if root.level > logging.INFO:
            root.setLevel(logging.INFO)
        return handler

    def _detach_file_logging(self, handler: logging.FileHandler, root_level: int) -> None:
        root = logging.getLogger()
        root.removeHandler(handler)
        handler.close()
        root.setLevel(root_level)
