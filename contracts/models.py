from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, Field


class ContractSpec(BaseModel):
    name: str
    output_path: Optional[str] = None
    output_kind: Literal["csv", "dir", "file"] = "csv"
    description: Optional[str] = None
    has_header: bool = True
    min_columns: int = 0
    value_range: Optional[Tuple[float, float]] = None
    min_entries: int = Field(default=0, description="Minimum number of entries for dir outputs.")


def make_pixel_features_contract(
    name: str,
    feature_count: int,
    output_path: Optional[str] = None,
    description: Optional[str] = None,
) -> ContractSpec:
    return ContractSpec(
        name=name,
        output_path=output_path,
        description=description,
        has_header=False,
        min_columns=feature_count,
        value_range=(0.0, 1.0),
    )


PIXEL_FEATURES_CONTRACT = ContractSpec(
    name="pixel_features",
    description=(
        "Headerless CSV of normalised MNIST pixels, one image per row. "
        "Generate it with: python GetData/get_mnist.py resources/mnist2500_X_custom.csv"
    ),
    has_header=False,
    min_columns=1,
    value_range=(0.0, 1.0),
)

RUN_CONFIG_CONTRACT = ContractSpec(
    name="run_config",
    output_kind="file",
    description="Resolved configuration snapshot written at the start of every run.",
)

FRAMES_OUTPUT_CONTRACT = ContractSpec(
    name="frames_output",
    output_kind="dir",
    description="Directory of PNG frames written by the frames display.",
    min_entries=1,
)
