import os
import sys

import pytest

# Make ``import loraprr`` work from a source checkout without installing.
SRC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from loraprr.config import ExperimentConfig  # noqa: E402


@pytest.fixture
def config(tmp_path):
    return ExperimentConfig(output_path=str(tmp_path / "prr_results.txt"))
