"""Matrix input, result export and reporting."""

from precisioncg.io.matrix_market import load_matrix_market
from precisioncg.io.mat_export import export_convergence_data, precision_digits
from precisioncg.io.report import print_num_results

__all__ = [
    "load_matrix_market",
    "export_convergence_data",
    "precision_digits",
    "print_num_results",
]
