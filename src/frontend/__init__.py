"""Front-end pipeline glue for parsing and feature detection."""

from .pipeline import (
    FrontEndResult,
    NoFeaturesDetected,
    detect,
    get_ecma_features,
    get_min_ecma_version,
    minimum_edition,
    run_frontend,
)

__all__ = [
    "FrontEndResult",
    "NoFeaturesDetected",
    "detect",
    "get_ecma_features",
    "get_min_ecma_version",
    "minimum_edition",
    "run_frontend",
]
