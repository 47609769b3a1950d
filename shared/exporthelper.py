from typing import List, Dict
from io import StringIO
from fastapi.responses import StreamingResponse
import pandas as pd


def rows_to_csv(data: List[Dict], column_map: Dict[str, str]) -> str:
    """
    Render a list of dictionaries as CSV text with a fixed header.

    Args:
        data: List of dictionaries (each dict = row)
        column_map: Mapping of data keys -> header names, in column order

    Fields containing a comma, quote or newline are quoted and embedded
    quotes doubled. Missing keys and None become empty cells.
    """
    df = pd.DataFrame(data, columns=list(column_map.keys()), dtype=object)
    df = df.fillna("").astype(str)
    df = df.rename(columns=column_map)

    output = StringIO()
    df.to_csv(output, index=False, lineterminator="\n")
    return output.getvalue().rstrip("\n")


def export_to_csv(
    data: List[Dict],
    column_map: Dict[str, str],
    filename: str = "export.csv",
) -> StreamingResponse:
    content = rows_to_csv(data, column_map)

    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"'
    }

    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers=headers
    )
