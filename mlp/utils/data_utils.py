"""
Data Utilities
==============

The :class:`Dataset` container and the plain-text loader for labelled
examples.

File format
-----------
::

    <num_inputs> <num_outputs> <num_examples>
    x_1 ... x_I  d_1 ... d_K
    ...

Fields are separated by any whitespace and blank lines are skipped.  Extra
header fields and lines after the declared examples are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence

from ..core.errors import DataFormatError
from .logger import get_logger

logger = get_logger(__name__)

InputVector = tuple[float, ...]
OutputVector = tuple[float, ...]


# ────────────────────────────────────────────────────────────────────
# Dataset
# ────────────────────────────────────────────────────────────────────
class Dataset:
    """Ordered mapping from input vector to desired output vector.

    Iteration yields input vectors in insertion order and ``dataset[x]``
    returns the desired outputs.  Adding an input vector that is already
    present overwrites its outputs.

    Parameters
    ----------
    examples : iterable of (inputs, outputs) pairs, optional.
    """

    def __init__(
        self, examples: Iterable[tuple[Sequence[float], Sequence[float]]] = ()
    ) -> None:
        self._examples: dict[InputVector, OutputVector] = {}
        self._inputs_length = 0
        self._outputs_length = 0
        for inputs, outputs in examples:
            self.add(inputs, outputs)

    @property
    def inputs_length(self) -> int:
        return self._inputs_length

    @property
    def outputs_length(self) -> int:
        return self._outputs_length

    def add(self, inputs: Sequence[float], outputs: Sequence[float]) -> None:
        """Insert one example; the first one fixes both vector lengths."""
        x = tuple(float(v) for v in inputs)
        d = tuple(float(v) for v in outputs)
        if not self._examples:
            self._inputs_length = len(x)
            self._outputs_length = len(d)
        elif len(x) != self._inputs_length or len(d) != self._outputs_length:
            raise DataFormatError(
                f"example of shape ({len(x)}, {len(d)}) does not fit a dataset of "
                f"shape ({self._inputs_length}, {self._outputs_length})"
            )
        self._examples[x] = d

    def clear(self) -> None:
        self._examples.clear()
        self._inputs_length = 0
        self._outputs_length = 0

    def reload(self, path: str | Path) -> None:
        """Replace the contents with the examples of ``path``.

        The dataset is left empty when the file cannot be parsed.
        """
        self.clear()
        loaded = load_dataset(path)
        self._examples = loaded._examples
        self._inputs_length = loaded.inputs_length
        self._outputs_length = loaded.outputs_length

    def __len__(self) -> int:
        return len(self._examples)

    def __iter__(self) -> Iterator[InputVector]:
        return iter(self._examples)

    def __getitem__(self, inputs: Sequence[float]) -> OutputVector:
        return self._examples[tuple(float(v) for v in inputs)]

    def __contains__(self, inputs: object) -> bool:
        if not isinstance(inputs, (tuple, list)):
            return False
        return tuple(float(v) for v in inputs) in self._examples

    def __repr__(self) -> str:
        return (
            f"Dataset(examples={len(self)}, inputs_length={self._inputs_length}, "
            f"outputs_length={self._outputs_length})"
        )


# ────────────────────────────────────────────────────────────────────
# Loader
# ────────────────────────────────────────────────────────────────────
def _parse_floats(fields: list[str], path: Path, line_no: int) -> list[float]:
    try:
        return [float(f) for f in fields]
    except ValueError as exc:
        raise DataFormatError(f"{path}:{line_no}: Data is corrupted. ({exc})") from exc


def load_dataset(path: str | Path) -> Dataset:
    """Parse a dataset file.

    Parameters
    ----------
    path : str | Path — file in the format described in the module docstring.

    Returns
    -------
    dataset : Dataset

    Raises
    ------
    DataFormatError — bad header, wrong field count, non-numeric field, or
        fewer example lines than the header declares, or bytes that are not UTF-8.
    OSError — the file cannot be read.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            lines = [(no, line.split()) for no, line in enumerate(f, start=1)]
        except UnicodeDecodeError as exc:
            raise DataFormatError(
                f"{path}: file is not valid UTF-8 text ({exc.reason})"
            ) from exc
    lines = [(no, fields) for no, fields in lines if fields]

    if not lines or len(lines[0][1]) < 3:
        line_no = lines[0][0] if lines else 1
        raise DataFormatError(f"{path}:{line_no}: Header is not valid.")

    header_no, header = lines[0]
    try:
        n_inputs, n_outputs, n_examples = (int(v) for v in header[:3])
    except ValueError as exc:
        raise DataFormatError(f"{path}:{header_no}: Header is not valid.") from exc
    if n_inputs < 0 or n_outputs < 0 or n_examples < 0:
        raise DataFormatError(f"{path}:{header_no}: Header is not valid.")

    body = lines[1:]
    if len(body) < n_examples:
        raise DataFormatError(
            f"{path}: header declares {n_examples} examples but only "
            f"{len(body)} lines follow"
        )

    dataset = Dataset()
    width = n_inputs + n_outputs
    for line_no, fields in body[:n_examples]:
        if len(fields) != width:
            raise DataFormatError(
                f"{path}:{line_no}: Data is corrupted. "
                f"Expected {width} fields, found {len(fields)}"
            )
        values = _parse_floats(fields, path, line_no)
        dataset.add(values[:n_inputs], values[n_inputs:])

    logger.info(
        "Loaded %d examples (%d inputs, %d outputs) from %s",
        len(dataset), n_inputs, n_outputs, path,
    )
    return dataset
