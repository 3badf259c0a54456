"""Shape discriminant and result value shared by both normalizers.

Each normalizer detects the input shape up front, parses the document
into a shape-specific intermediate record and converts that record to the
canonical dataset.  Conversion returns a ``NormalizationOutcome`` instead
of raising from deep inside nested parsing; the public entry points raise
only at the boundary via ``unwrap()``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from hotel_standards.normalization.errors import DatasetError

T = TypeVar("T")


class DatasetShape(str, Enum):
    """Recognized raw dataset layouts."""

    NATIVE = "native"  # hand-authored, already close to the canonical model
    EXPORTED = "exported"  # machine-exported spreadsheet layout
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class NormalizationOutcome(Generic[T]):
    """Either a canonical dataset or the error that prevented building one."""

    shape: DatasetShape
    dataset: Optional[T] = None
    error: Optional[DatasetError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.dataset is not None

    @classmethod
    def success(cls, shape: DatasetShape, dataset: T) -> "NormalizationOutcome[T]":
        return cls(shape=shape, dataset=dataset)

    @classmethod
    def failure(cls, error: DatasetError, shape: DatasetShape = DatasetShape.UNKNOWN) -> "NormalizationOutcome[T]":
        return cls(shape=shape, error=error)

    def unwrap(self) -> T:
        """Return the dataset or raise the captured error."""
        if self.error is not None:
            raise self.error
        if self.dataset is None:
            raise DatasetError(f"No dataset produced for {self.shape.value} input")
        return self.dataset
