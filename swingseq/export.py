"""Tabular export of swing analysis results.

Functions
---------
to_dataframe
    Convert results to a flat pandas DataFrame (one row per movement).
export_csv
    Write results and session summary CSV files.
export_summary_json
    Write results plus session summary as JSON.
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd

from .schema import SwingAnalysisResult, save_results
from .session import summarize_session

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [f.name for f in fields(SwingAnalysisResult)]


def to_dataframe(results: Sequence[SwingAnalysisResult]) -> pd.DataFrame:
    """Convert results to a DataFrame with one row per movement.

    ``data_quality_flags`` is joined with ``";"`` so every column holds
    a scalar and the frame maps directly onto a relational table.
    """
    rows = []
    for r in results:
        row = r.to_dict()
        row["data_quality_flags"] = ";".join(r.data_quality_flags)
        rows.append(row)
    if not rows:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def export_csv(
    results: Sequence[SwingAnalysisResult],
    output_dir: Union[str, Path],
    prefix: str = "swings",
) -> List[str]:
    """Export results to CSV files.

    Parameters
    ----------
    results : sequence of SwingAnalysisResult
        Per-movement results.
    output_dir : str or Path
        Directory path for output files. Created if it does not exist.
    prefix : str, optional
        Filename prefix (default ``"swings"``).

    Returns
    -------
    list of str
        Paths to all created CSV files.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    created = []

    path = out / f"{prefix}_results.csv"
    to_dataframe(results).to_csv(path, index=False)
    created.append(str(path))

    if results:
        summary = summarize_session(results)
        path = out / f"{prefix}_summary.csv"
        pd.DataFrame([summary.to_dict()]).to_csv(path, index=False)
        created.append(str(path))

    logger.info(f"Exported {len(created)} CSV files to {out}")
    return created


def export_summary_json(
    results: Sequence[SwingAnalysisResult],
    path: Union[str, Path],
) -> str:
    """Save results together with their session summary as JSON."""
    results = list(results)
    save_results(results, path, summary=summarize_session(results))
    return str(path)
