"""
Loading labeled records from delimited text files.

Each non-empty line holds a fixed number of numeric feature fields
followed by a label text field. Header lines are not detected and must
be removed upstream.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..exceptions import DataFormatError, UnknownLabelError
from .record import DataRecord, LabelMapping

logger = logging.getLogger(__name__)


def _split_lines(path: Path, delimiter: str) -> List[Tuple[int, str, str]]:
    rows = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            label_text = line.strip().split(delimiter)[-1].strip()
            rows.append((line_no, line, label_text))
    return rows


def load_records(
    path: Union[str, Path],
    mapping: Optional[LabelMapping] = None,
    delimiter: str = ",",
    num_features: Optional[int] = None
) -> List[DataRecord]:
    """
    Parse every non-empty line of a data file into a DataRecord.

    Args:
        path: Path to the data file
        mapping: Label mapping; when None one is built from the labels in
            order of first appearance
        delimiter: Field delimiter
        num_features: Expected feature count; when None the arity of the
            first record is used for the rest of the file

    Returns:
        List of records in file order

    Raises:
        DataFormatError: If a line is malformed or arities differ
        UnknownLabelError: If a label is missing from the given mapping
    """
    path = Path(path)
    rows = _split_lines(path, delimiter)

    if mapping is None and rows:
        mapping = LabelMapping.from_labels(
            (label_text for _, _, label_text in rows), name=path.stem
        )

    records: List[DataRecord] = []
    for line_no, line, _ in rows:
        try:
            record = DataRecord.from_line(line, mapping, delimiter, num_features)
        except DataFormatError as e:
            raise DataFormatError(f"{path.name}:{line_no}: {e}") from e
        except UnknownLabelError as e:
            raise UnknownLabelError(f"{path.name}:{line_no}: {e}") from e

        if num_features is None:
            num_features = record.num_features

        records.append(record)

    logger.info("Successfully read %d data records from %s", len(records), path.name)

    return records
