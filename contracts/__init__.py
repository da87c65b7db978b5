from .models import (
    FRAMES_OUTPUT_CONTRACT,
    PIXEL_FEATURES_CONTRACT,
    RUN_CONFIG_CONTRACT,
    ContractSpec,
    make_pixel_features_contract,
)
from .validate import bind_output_path, validate_contract

__all__ = [
    "FRAMES_OUTPUT_CONTRACT",
    "PIXEL_FEATURES_CONTRACT",
    "RUN_CONFIG_CONTRACT",
    "ContractSpec",
    "bind_output_path",
    "make_pixel_features_contract",
    "validate_contract",
]
