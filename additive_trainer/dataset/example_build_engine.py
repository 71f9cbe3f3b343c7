# additive_trainer/dataset/example_build_engine.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Set

import numpy as np
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from additive_trainer import logs
from additive_trainer.core.types import Example, FeatureVector
from additive_trainer.utils.errors import UserInputError


class ExampleBuildEngine:
    """
    ExampleBuildEngine（FINAL）

    Builds pointwise Examples from a flat frame.

    Column contract:
    - label_column            -> float feature (rank_key, label_column)
    - "family.name", numeric  -> float feature (family, name)
    - "family", object/string -> string feature (family, cell value)

    Numeric sanitization:
    - ±inf → NaN, NaN cells are skipped (row kept)
    - rows whose label is NaN are dropped
    """

    def __init__(self, *, rank_key: str, label_column: str, separator: str = "."):
        self.rank_key = rank_key
        self.label_column = label_column
        self.separator = separator

    def from_frame(self, df: pd.DataFrame) -> List[Example]:
        if self.label_column not in df.columns:
            raise UserInputError(
                f"label column {self.label_column!r} not in frame "
                f"(columns: {', '.join(map(str, df.columns))})"
            )

        df = df.replace([np.inf, -np.inf], np.nan)
        before = len(df)
        df = df.loc[df[self.label_column].notna()]
        if len(df) < before:
            logs.warning(
                f"[ExampleBuildEngine] dropped {before - len(df)} rows with NaN label"
            )

        feature_cols = [c for c in df.columns if c != self.label_column]
        numeric = {
            c for c in feature_cols if pd.api.types.is_numeric_dtype(df[c])
        }

        examples: List[Example] = []
        for row in df.to_dict(orient="records"):
            floats: Dict[str, Dict[str, float]] = {
                self.rank_key: {self.label_column: float(row[self.label_column])}
            }
            strings: Dict[str, Set[str]] = {}

            for col in feature_cols:
                value = row[col]
                if pd.isna(value):
                    continue
                if col in numeric:
                    family, _, name = col.partition(self.separator)
                    floats.setdefault(family, {})[name or family] = float(value)
                else:
                    strings.setdefault(col, set()).add(str(value))

            examples.append(
                Example.pointwise(
                    FeatureVector(
                        float_features=floats,
                        string_features={f: frozenset(t) for f, t in strings.items()},
                    )
                )
            )

        return examples


def load_examples(
        path: str | Path,
        *,
        rank_key: str,
        label_column: str,
) -> List[Example]:
    """
    Read a parquet file (or directory) and build pointwise examples.

    Unreadable input raises UserInputError.
    """
    try:
        table = pq.read_table(str(path))
    except (OSError, pa.ArrowException) as e:
        raise UserInputError(f"cannot read examples from {path}: {e}") from e

    df = table.to_pandas()
    examples = ExampleBuildEngine(
        rank_key=rank_key, label_column=label_column
    ).from_frame(df)
    logs.info(f"[load_examples] {len(examples)} examples from {path}")
    return examples
