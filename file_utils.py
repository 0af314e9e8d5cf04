import datetime
import os
from typing import List, Optional

import pandas as pd

from error_utils import data_error, file_error

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")


def read_isins(path: str, column: Optional[str] = None) -> List[str]:
    """
    Read candidate ISINs from a file.

    Plain text files hold one candidate per line. CSV and Excel files are read
    with pandas and the candidates are taken from `column` (first column if
    not given). Candidates are returned as written, only line endings and
    empty entries are dropped.

    Args:
        path: Path to the input file
        column: Column holding the ISINs (CSV and Excel only)

    Returns:
        List of candidate strings in file order
    """
    extension = os.path.splitext(path)[1].lower()
    try:
        if extension == ".csv":
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        elif extension in SPREADSHEET_EXTENSIONS:
            df = pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False)
        else:
            with open(path, "r", encoding="utf-8") as f:
                return [line.rstrip("\r\n") for line in f if line.strip()]
    except pd.errors.EmptyDataError:
        data_error("ISIN list", "file is empty", path)
    except (FileNotFoundError, OSError) as e:
        file_error("reading", path, str(e))

    if column is None:
        column = df.columns[0]
    elif column not in df.columns:
        data_error(
            "ISIN list",
            f"column '{column}' not found",
            path,
            [f"Available columns: {', '.join(map(str, df.columns))}"]
        )

    return [value for value in df[column].tolist() if value]


def generate_timestamped_filename(base_name: str,
                                  extension: str = ".xml",
                                  directory: str = "data",
                                  timestamp_format: str = "%Y%m%d_%H%M%S") -> str:
    timestamp = datetime.datetime.now().strftime(timestamp_format)
    return os.path.join(directory, f"{base_name}_{timestamp}{extension}")


def get_output_filename(user_specified: Optional[str],
                        default_base: str,
                        file_type: str = "report") -> str:
    """
    Get the output filename, either user-specified or auto-generated with timestamp.

    Args:
        user_specified: User-specified filename (from --report)
        default_base: Default base name for the file
        file_type: Description of file type for messages

    Returns:
        Final output filename to use
    """
    if user_specified:
        print(f"Using user-specified output file: {user_specified}")
        return user_specified
    timestamped_file = generate_timestamped_filename(default_base)
    print(f"Generated timestamped {file_type} file: {timestamped_file}")
    return timestamped_file


def ensure_directory_exists(file_path: str):
    """Create the parent directory of file_path if it is missing."""
    directory = os.path.dirname(file_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)
        print(f"Created directory: {directory}")
