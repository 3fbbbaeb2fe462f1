"""Tests for experiment configuration and the driver."""

import io
import numpy as np
import pytest

from precisioncg.algebra import SparseMatrix, to_doubles
from precisioncg.core.config import (
    DEFAULT_MAX_ITER,
    DEFAULT_TOLERANCE,
    ExperimentConfig,
    config_from_dict,
    load_config,
)
from precisioncg.core.precision import PrecisionKind
from precisioncg.errors import ConfigError, MatrixMarketError
from precisioncg.experiments import main, run_experiment, solve_problem
from precisioncg.scalars import DDNumber

MATRIX = """%%MatrixMarket matrix coordinate real symmetric
3 3 5
1 1 4.0
2 1 -1.0
2 2 4.0
3 2 -1.0
3 3 4.0
"""


@pytest.fixture
def matrix_file(tmp_path):
    path = tmp_path / "inputs" / "tri3.mtx"
    path.parent.mkdir()
    path.write_text(MATRIX)
    return path


def test_load_config_resolves_relative_paths(tmp_path, matrix_file):
    """Paths in the YAML resolve against the YAML file's directory."""
    cfg_file = tmp_path / "experiment.yaml"
    cfg_file.write_text(
        "problem:\n"
        "  name: tri\n"
        "  matrix: inputs/tri3.mtx\n"
        "solver:\n"
        "  max_iter: 50\n"
        "  tolerance: 1.0e-20\n"
        "precisions: [dd, QX]\n"
        "output:\n"
        "  directory: results\n"
    )

    cfg = load_config(cfg_file)

    assert cfg.matrix_path == matrix_file.resolve()
    assert cfg.problem_name == "tri"
    assert cfg.max_iter == 50
    assert cfg.tolerance == 1e-20
    assert cfg.precisions == [PrecisionKind.DD, PrecisionKind.QX]
    assert cfg.output_dir == (tmp_path / "results").resolve()


def test_config_defaults(tmp_path):
    """Only the matrix is required."""
    cfg = config_from_dict({"problem": {"matrix": "nos7.mtx"}}, base=tmp_path)

    assert cfg.problem_name == "nos7"
    assert cfg.max_iter == DEFAULT_MAX_ITER
    assert cfg.tolerance == DEFAULT_TOLERANCE
    assert cfg.precisions == list(PrecisionKind)
    assert cfg.output_dir is None


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"problem": {"name": "x"}},
        {"problem": {"matrix": "a.mtx"}, "precisions": ["half"]},
        {"problem": {"matrix": "a.mtx"}, "solver": {"max_iter": 0}},
        {"problem": {"matrix": "a.mtx"}, "solver": {"max_iter": "many"}},
        {"problem": {"matrix": "a.mtx"}, "solver": {"tolerance": -1.0}},
        {"problem": "matrix.mtx"},
        {"problem": {"matrix": "a.mtx"}, "solver": [1000]},
        {"problem": {"matrix": "a.mtx"}, "output": "results"},
    ],
)
def test_invalid_config(tmp_path, raw):
    with pytest.raises(ConfigError):
        config_from_dict(raw, base=tmp_path)


def test_load_config_errors(tmp_path):
    """Unreadable files and non-mapping documents are rejected."""
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(listing)


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_solve_problem_ones_solution():
    """b = A·ones and x0 = 0 recovers ones."""
    A = SparseMatrix.from_triplets(
        (2, 2), [0, 0, 1, 1], [0, 1, 0, 1], [3.0, 1.0, 1.0, 2.0], DDNumber
    )

    result, x = solve_problem(A, max_iter=10, tolerance=1e-20)

    assert result.converged
    assert result.iterations <= 2
    assert np.allclose(to_doubles(x), 1.0)


def test_run_experiment_reports_and_exports(tmp_path, matrix_file):
    out_dir = tmp_path / "results"
    cfg = ExperimentConfig(
        matrix_path=matrix_file,
        problem_name="tri3",
        precisions=["double", "dd"],
        max_iter=20,
        output_dir=out_dir,
    )
    buf = io.StringIO()

    results = run_experiment(cfg, buf)

    assert list(results) == [PrecisionKind.DOUBLE, PrecisionKind.DD]
    assert results[PrecisionKind.DD].converged
    assert (out_dir / "tri3_double.mat").exists()
    assert (out_dir / "tri3_dd.mat").exists()
    text = buf.getvalue()
    assert "Problem: tri3 [double]" in text
    assert "Problem: tri3 [dd]" in text


def test_run_experiment_missing_matrix(tmp_path):
    cfg = ExperimentConfig(matrix_path=tmp_path / "none.mtx", problem_name="none")
    with pytest.raises(MatrixMarketError):
        run_experiment(cfg, io.StringIO())


def test_main_with_matrix_flag(tmp_path, matrix_file, capsys):
    out_dir = tmp_path / "out"

    code = main([
        "--matrix", str(matrix_file),
        "--precision", "qx",
        "--max-iter", "10",
        "--output", str(out_dir),
        "--log-level", "WARNING",
    ])

    assert code == 0
    assert (out_dir / "tri3_qx.mat").exists()
    assert "Problem: tri3 [qx]" in capsys.readouterr().out


def test_main_with_config_file(tmp_path, matrix_file, capsys):
    cfg_file = tmp_path / "exp.yaml"
    cfg_file.write_text(
        "problem:\n  matrix: inputs/tri3.mtx\nprecisions: [dd]\n"
    )

    assert main([str(cfg_file), "--name", "renamed"]) == 0
    assert "Problem: renamed [dd]" in capsys.readouterr().out


def test_main_input_errors_return_two(tmp_path, matrix_file):
    assert main(["--matrix", str(tmp_path / "missing.mtx")]) == 2
    assert main(["--matrix", str(matrix_file), "--max-iter", "0"]) == 2
    assert main([str(tmp_path / "missing.yaml")]) == 2


def test_main_requires_input():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_non_mapping_section_in_yaml(tmp_path):
    """A scalar where a section belongs is a config error, not a TypeError."""
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text("problem: matrix.mtx\n")

    with pytest.raises(ConfigError, match="problem must be a mapping"):
        load_config(cfg_file)
