# ribotyper/pipelines/classification/summary.py
"""
Per-classification PASS/FAIL counts for a finished run.
"""

from typing import Iterable

import pandas as pd

from ribotyper.models.result import ClassificationResult

SUMMARY_COLUMNS = ['classification', 'total', 'pass', 'fail']


def summarize_results(results: Iterable[ClassificationResult]) -> pd.DataFrame:
    """Count sequences per classification, with a final '*all*' row

    Args:
        results: Classification results

    Returns:
        DataFrame with classification, total, pass and fail columns
    """
    df = pd.DataFrame([
        {'classification': r.classification, 'passed': r.passed}
        for r in results
    ], columns=['classification', 'passed'])

    if df.empty:
        return pd.DataFrame([{'classification': '*all*', 'total': 0, 'pass': 0, 'fail': 0}],
                            columns=SUMMARY_COLUMNS)

    df['passed'] = df['passed'].astype(bool)
    grouped = df.groupby('classification', sort=True)['passed']
    summary = pd.DataFrame({
        'total': grouped.size(),
        'pass': grouped.sum().astype(int),
    }).reset_index()
    summary['fail'] = summary['total'] - summary['pass']

    overall = pd.DataFrame([{
        'classification': '*all*',
        'total': len(df),
        'pass': int(df['passed'].sum()),
        'fail': int((~df['passed']).sum()),
    }])

    return pd.concat([summary, overall], ignore_index=True)[SUMMARY_COLUMNS]
