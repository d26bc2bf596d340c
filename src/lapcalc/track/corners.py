"""Distance-based track-section labelling."""

from __future__ import annotations

import bisect
import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from lapcalc.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class CornerTable:
    """Ascending lookup from distance-from-start to a section label.

    Args:
        thresholds: Strictly increasing upper bounds of each section [m].
        labels: Label of each section, aligned with ``thresholds``.
        final_label: Label used beyond the last threshold.
    """

    thresholds: tuple[float, ...]
    labels: tuple[str, ...]
    final_label: str

    def __post_init__(self) -> None:
        """Validate table shape on construction."""
        self.validate()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, str]], final_label: str) -> CornerTable:
        """Build a table from ``(threshold, label)`` pairs.

        Args:
            pairs: Ascending ``(threshold, label)`` pairs.
            final_label: Label used beyond the last threshold.

        Returns:
            Validated corner table.
        """
        items = list(pairs)
        return cls(
            thresholds=tuple(float(threshold) for threshold, _ in items),
            labels=tuple(str(label) for _, label in items),
            final_label=str(final_label),
        )

    def validate(self) -> None:
        """Validate thresholds and labels.

        Raises:
            lapcalc.utils.exceptions.ConfigurationError: If thresholds and
                labels differ in length or thresholds are not strictly
                increasing.
        """
        if len(self.thresholds) != len(self.labels):
            msg = "thresholds and labels must have equal length"
            raise ConfigurationError(msg)
        for lower, upper in zip(self.thresholds, self.thresholds[1:]):
            if upper <= lower:
                msg = f"thresholds must be strictly increasing, got {lower} then {upper}"
                raise ConfigurationError(msg)

    def index_for(self, distance: float) -> int:
        """Return the section index for a distance from the start line.

        Args:
            distance: Distance from the start line [m].

        Returns:
            Index of the first threshold strictly greater than ``distance``;
            ``len(thresholds)`` for the final section.
        """
        return bisect.bisect_right(self.thresholds, distance)

    def label_for(self, distance: float) -> str:
        """Return the section label for a distance from the start line.

        Args:
            distance: Distance from the start line [m].

        Returns:
            Section label.
        """
        index = self.index_for(distance)
        if index < len(self.labels):
            return self.labels[index]
        return self.final_label


def load_corner_table_json(path: str | Path) -> CornerTable:
    """Load a corner table from JSON.

    The document holds ``{"sections": [[threshold, label], ...],
    "final_label": label}``.

    Args:
        path: Path to the JSON document.

    Returns:
        Validated corner table.

    Raises:
        lapcalc.utils.exceptions.ConfigurationError: If the file is missing
            or does not follow the expected schema.
    """
    file_path = Path(path)
    if not file_path.exists():
        msg = f"Corner table not found: {file_path}"
        raise ConfigurationError(msg)

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
        sections = [(float(threshold), str(label)) for threshold, label in data["sections"]]
        final_label = str(data["final_label"])
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
        msg = f"Invalid corner table document: {file_path}"
        raise ConfigurationError(msg) from exc

    return CornerTable.from_pairs(sections, final_label)


EXAMPLE_CORNER_TABLE = CornerTable.from_pairs(
    [
        (554.0, "1"),
        (684.0, "2"),
        (780.0, "3"),
        (879.0, "4"),
        (1157.0, "5"),
        (1621.0, "6"),
        (1788.0, "7"),
        (1895.0, "8"),  # 8a
        (2010.0, "8"),  # 8b
        (2238.0, "9"),
        (2455.0, "10"),
        (2687.0, "11"),
        (2999.0, "12"),
        (3249.0, "13"),
        (3332.0, "14"),
        (3493.0, "15"),
    ],
    final_label="16",
)
