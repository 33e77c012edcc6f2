"""
Serialize stored records back to CSV text for download.
"""

import csv
from typing import Any, Dict, List
import pandas as pd


def export_csv(records: List[Dict[str, Any]]) -> str:
    """
    Render records as CSV.

    Columns follow the key order of the first record; keys missing from a
    later record export as empty values. Values containing a comma, quote
    or newline are quoted with embedded quotes doubled. Lines are joined
    with "\\n" and there is no trailing newline.
    """
    if not records:
        return ""

    headers = list(records[0].keys())
    df = pd.DataFrame(records, columns=headers, dtype=object)

    csv_text = df.to_csv(
        index=False,
        lineterminator="\n",
        quoting=csv.QUOTE_MINIMAL,
        na_rep=""
    )
    return csv_text[:-1] if csv_text.endswith("\n") else csv_text
