"""
Labeled Data Records

Defines the bidirectional label mapping and the immutable feature
record parsed from one line of an input file.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..exceptions import DataFormatError, UnknownLabelError


class LabelMapping:
    """
    Bidirectional mapping between class label ids and label texts.

    The mapping is total over the classes it was built with and injective
    in both directions: every id has exactly one text and every text has
    exactly one id.

    Attributes:
        name: Name of this mapping (e.g., 'iris')
        id_to_text: Mapping from label id (int) to label text (str)
        text_to_id: Mapping from label text (str) to label id (int)

    Examples:
        >>> mapping = LabelMapping({0: 'cat', 1: 'dog'}, name='pets')
        >>> mapping.label_text(1)
        'dog'
        >>> mapping.label_id('cat')
        0
    """

    def __init__(self, labels: Mapping[int, str], name: str = "labels"):
        """
        Initialize mapping.

        Args:
            labels: Label id to label text mapping
            name: Name identifier for this mapping

        Raises:
            ValueError: If an id is not a non-negative int or a text repeats
        """
        self.name = name
        self.id_to_text: Dict[int, str] = {}
        self.text_to_id: Dict[str, int] = {}

        for label_id, label_text in labels.items():
            if isinstance(label_id, bool) or not isinstance(label_id, int) or label_id < 0:
                raise ValueError(f"label id must be a non-negative int, got {label_id!r}")
            if label_text in self.text_to_id:
                raise ValueError(
                    f"label text {label_text!r} is mapped to both "
                    f"{self.text_to_id[label_text]} and {label_id}"
                )
            self.id_to_text[label_id] = label_text
            self.text_to_id[label_text] = label_id

        if not self.id_to_text:
            raise ValueError("label mapping must contain at least one class")

    @classmethod
    def from_labels(cls, texts: Iterable[str], name: str = "labels") -> "LabelMapping":
        """
        Build a mapping assigning ids in order of first appearance.

        Args:
            texts: Label texts, duplicates allowed
            name: Name identifier for this mapping

        Returns:
            LabelMapping with ids 0..k-1
        """
        ordered: Dict[str, int] = {}
        for text in texts:
            if text not in ordered:
                ordered[text] = len(ordered)
        return cls({idx: text for text, idx in ordered.items()}, name=name)

    def label_text(self, label_id: int) -> str:
        """
        Get label text for a label id.

        Raises:
            UnknownLabelError: If the id is not mapped
        """
        try:
            return self.id_to_text[label_id]
        except KeyError:
            raise UnknownLabelError(
                f"unrecognized {self.name} label id: {label_id}"
            ) from None

    def label_id(self, label_text: str) -> int:
        """
        Get label id for a label text.

        Raises:
            UnknownLabelError: If the text is not mapped
        """
        try:
            return self.text_to_id[label_text]
        except KeyError:
            raise UnknownLabelError(
                f"unrecognized {self.name} label name: {label_text}"
            ) from None

    @property
    def label_ids(self) -> List[int]:
        """All known label ids in ascending order."""
        return sorted(self.id_to_text)

    def __len__(self) -> int:
        return len(self.id_to_text)

    def __contains__(self, label_id: int) -> bool:
        return label_id in self.id_to_text

    def __eq__(self, other) -> bool:
        if not isinstance(other, LabelMapping):
            return NotImplemented
        return self.id_to_text == other.id_to_text

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.id_to_text.items())))

    def __repr__(self) -> str:
        return f"LabelMapping(name={self.name!r}, labels={self.id_to_text})"


IRIS_LABELS = LabelMapping(
    {
        0: "Iris-setosa",
        1: "Iris-versicolor",
        2: "Iris-virginica",
    },
    name="iris species",
)


@dataclass(frozen=True)
class DataRecord:
    """
    A labeled feature vector.

    Attributes:
        features: Numeric feature values, same arity for every record of a dataset
        label_id: Class id under ``mapping``
        label_text: Human-readable class name under ``mapping``
        mapping: Label mapping the record was created with

    Examples:
        >>> record = DataRecord.from_line("5.1,3.5,1.4,0.2,Iris-setosa", IRIS_LABELS)
        >>> record.label_id
        0
        >>> record.features
        (5.1, 3.5, 1.4, 0.2)
    """

    features: Tuple[float, ...]
    label_id: int
    label_text: str
    mapping: LabelMapping = field(compare=False, repr=False)

    def __post_init__(self):
        if self.mapping.label_text(self.label_id) != self.label_text:
            raise UnknownLabelError(
                f"label id {self.label_id} and label text {self.label_text!r} "
                f"disagree under the {self.mapping.name} mapping"
            )

    @classmethod
    def create(
        cls,
        features: Iterable[float],
        label_text: str,
        mapping: LabelMapping
    ) -> "DataRecord":
        """Create a record from features and label text, resolving the id."""
        return cls(
            features=tuple(float(value) for value in features),
            label_id=mapping.label_id(label_text),
            label_text=label_text,
            mapping=mapping,
        )

    @classmethod
    def from_line(
        cls,
        line: str,
        mapping: LabelMapping,
        delimiter: str = ",",
        num_features: Optional[int] = None
    ) -> "DataRecord":
        """
        Parse one input line: feature fields followed by a label field.

        Args:
            line: Raw input line (trailing newline allowed)
            mapping: Label mapping used to resolve the label text
            delimiter: Field delimiter
            num_features: Expected feature count (None = everything but the last field)

        Returns:
            Parsed DataRecord

        Raises:
            DataFormatError: If the field count or a feature value is invalid
            UnknownLabelError: If the label text is not in the mapping
        """
        fields = [part.strip() for part in line.strip().split(delimiter)]

        if len(fields) < 2:
            raise DataFormatError(f"expected features and a label, got {line.strip()!r}")

        if num_features is not None and len(fields) != num_features + 1:
            raise DataFormatError(
                f"expected {num_features} features and a label, "
                f"got {len(fields)} fields in {line.strip()!r}"
            )

        try:
            features = tuple(float(value) for value in fields[:-1])
        except ValueError as e:
            raise DataFormatError(f"invalid feature value in {line.strip()!r}: {e}") from e

        return cls.create(features, fields[-1], mapping)

    @property
    def num_features(self) -> int:
        return len(self.features)

    def label_id_to_label_text(self, label_id: int) -> str:
        return self.mapping.label_text(label_id)

    def label_text_to_label_id(self, label_text: str) -> int:
        return self.mapping.label_id(label_text)
