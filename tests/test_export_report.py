"""Tests for .mat export and the text report."""

import io
import numpy as np
import pytest
import scipy.io

from precisioncg.core.result import ConvergenceResult
from precisioncg.io import export_convergence_data, precision_digits, print_num_results


@pytest.fixture
def converged_result():
    return ConvergenceResult(
        iterations=3,
        converged=True,
        elapsed=0.125,
        hist_relres_2=(1.0, 0.1, 1e-8, 1e-17),
        hist_relerr_2=(1.0, 0.2, 2e-8, 3e-17),
        hist_relerr_A=(2.5, 0.3, 4e-8, 5e-17),
        true_relres_2=2e-17,
    )


@pytest.fixture
def stalled_result():
    return ConvergenceResult(
        iterations=2,
        converged=False,
        elapsed=0.5,
        hist_relres_2=(1.0, 0.5, 0.25),
        hist_relerr_2=(1.0, 0.6, 0.3),
        hist_relerr_A=(1.5, 0.7, 0.35),
        true_relres_2=0.25,
    )


def test_precision_digits():
    """Export labels per precision, with double as the fallback."""
    assert precision_digits("double") == 15
    assert precision_digits("dd") == 30
    assert precision_digits("dq") == 66
    assert precision_digits("qx") == 33
    assert precision_digits("unknown") == 15


def test_export_round_trip(tmp_path, converged_result):
    """The written struct reloads with the recorded metadata and histories."""
    out = tmp_path / "nested" / "dir" / "nos7_dd.mat"

    assert export_convergence_data(converged_result, out, "nos7", "dd")
    assert out.exists()

    data = scipy.io.loadmat(str(out), simplify_cells=True)["data"]
    meta = data["metadata"]
    conv = data["convergence"]

    assert meta["matrix_name"] == "nos7"
    assert meta["precision_name"] == "dd"
    assert meta["precision_digits"] == 30
    assert meta["converged"] == 1
    assert meta["iterations_performed"] == 3
    assert meta["computation_time"] == pytest.approx(0.125)
    assert meta["final_relres_2norm"] == pytest.approx(1e-17)
    assert meta["final_true_relres_2norm"] == pytest.approx(2e-17)
    assert meta["final_relerr_2norm"] == pytest.approx(3e-17)
    assert meta["final_relerr_Anorm"] == pytest.approx(5e-17)

    assert np.array_equal(np.ravel(conv["hist_iterations"]), [0, 1, 2, 3])
    assert np.allclose(np.ravel(conv["hist_relres_2"]), converged_result.hist_relres_2)
    assert np.allclose(np.ravel(conv["hist_relerr_2"]), converged_result.hist_relerr_2)
    assert np.allclose(np.ravel(conv["hist_relerr_A"]), converged_result.hist_relerr_A)
    assert conv["iter_final"] == 3


def test_export_not_converged_flag(tmp_path, stalled_result):
    out = tmp_path / "stalled.mat"

    assert export_convergence_data(stalled_result, out, "m", "qx")

    meta = scipy.io.loadmat(str(out), simplify_cells=True)["data"]["metadata"]
    assert meta["converged"] == 0
    assert meta["precision_digits"] == 33


def test_export_failure_returns_false(tmp_path, converged_result):
    """An unwritable destination is reported, not raised."""
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    assert export_convergence_data(converged_result, blocker / "out.mat", "m", "dd") is False


def test_report_converged(converged_result):
    buf = io.StringIO()

    print_num_results(converged_result, "nos7", buf)

    lines = buf.getvalue().splitlines()
    assert lines[0] == "=========================="
    assert lines[1] == "Numerical Results."
    assert lines[2] == "Problem: nos7"
    assert "Converged! (iter = 3)" in lines
    assert "# Iter.: 3" in lines
    assert "Time[s]: 0.125" in lines
    assert "Relres_2norm = 1.00e-17" in lines
    assert "True_Relres_2norm = 2.00e-17" in lines
    assert "Relerr_2norm = 3.00e-17" in lines
    assert "Relerr_Anorm = 5.00e-17" in lines


def test_report_not_converged(stalled_result):
    buf = io.StringIO()

    print_num_results(stalled_result, stream=buf)

    text = buf.getvalue()
    assert "NOT converged. (max_iter = 2)" in text
    assert "Problem:" not in text
    assert "Relres_2norm = 2.50e-01" in text
