"""Keyword lists and thresholds for the category classifier.

Defaults are built in.  ``config/classifier.yaml`` may override any subset
of them; if the file does not exist, defaults are used.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel


class HourWeights(BaseModel):
    """Points awarded for the local start hour."""

    late_night_from: int = 23
    late_night: int = 4
    night_from: int = 21
    night: int = 3
    evening_from: int = 19
    evening: int = 1


class ClassifierConfig(BaseModel):
    """Signals for the nightlife score and the art override."""

    art_segment_keywords: list[str] = ["arts", "theatre", "art"]
    nightlife_title_keywords: list[str] = [
        "dj",
        "rave",
        "techno",
        "house music",
        "warehouse",
        "after party",
        "afterparty",
        "after-party",
        "club night",
        "nightclub",
        "dance party",
        "all night",
    ]
    nightlife_venue_keywords: list[str] = [
        "club",
        "lounge",
        "bar",
        "rooftop",
        "cabaret",
        "discotheque",
        "pub",
    ]
    dance_genre_keywords: list[str] = [
        "electronic",
        "dance",
        "techno",
        "house",
        "trance",
        "edm",
        "drum & bass",
        "dubstep",
        "disco",
    ]
    hours: HourWeights = HourWeights()
    title_weight: int = 3
    venue_weight: int = 2
    genre_weight: int = 2
    nightlife_threshold: int = 5


def load_classifier_config(path: Path) -> ClassifierConfig:
    """Load classifier configuration from a YAML file.

    Partial overrides are supported -- only the keys present in the YAML
    file replace defaults.
    """
    if not path.exists():
        return ClassifierConfig()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return ClassifierConfig(**data)
