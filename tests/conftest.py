from __future__ import annotations

from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def _memhier_output_root(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("memhier_out")


@pytest.fixture
def outdir(_memhier_output_root: Path, request: pytest.FixtureRequest) -> Path:
    case_dir = _memhier_output_root / request.node.name
    case_dir.mkdir(parents=True, exist_ok=True)
    return case_dir


@pytest.fixture(scope="session")
def config_dir() -> Path:
    return REPO_ROOT / "config"

