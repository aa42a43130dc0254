from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest
from PIL import Image

# Flat module layout: make the project root importable.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from journal_config_v1 import LOG_NAME, JournalConfig  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_journal_logger():
    yield
    logger = logging.getLogger(LOG_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


@pytest.fixture
def photo_dir(tmp_path: Path) -> Path:
    d = tmp_path / "photos"
    d.mkdir()
    Image.new("RGB", (40, 30), (160, 64, 64)).save(d / "cover.jpg", format="JPEG")
    Image.new("RGB", (20, 20), (10, 120, 30)).save(d / "andes.png", format="PNG")
    Image.new("RGB", (20, 20), (200, 200, 30)).save(d / "atacama.jpg", format="JPEG")
    return d


@pytest.fixture
def config(tmp_path: Path, photo_dir: Path) -> JournalConfig:
    return JournalConfig(
        data_path=tmp_path / "travelData.json",
        photo_dir=photo_dir,
        output_path=tmp_path / "out" / "journal.docx",
    )


@pytest.fixture
def sample_raw() -> dict:
    return {
        "tripTitle": "Chile 2026",
        "author": "R. Field",
        "subtitle": "A Study of Tectonic and Volcanic Formations",
        "coverImage": "cover.jpg",
        "days": [
            {
                "day": 1,
                "title": "Santiago",
                "description": "Arrival in the central valley.",
                "coordinates": "-33.45,-70.66",
                "geoNote": {
                    "title": "Andean Uplift",
                    "text": "Folded volcaniclastic sequences of the Abanico Formation exposed along the road cut east of the city.",
                },
                "images": [{"url": "andes.png", "caption": "Road cut"}, "atacama.jpg"],
                "image": "ignored.jpg",
            },
            {
                "day": 2,
                "title": "Atacama",
                "description": "Salt flats.",
                "image": "atacama.jpg",
            },
            {
                "day": 3,
                "title": "Rapa Nui",
                "description": "Basalt flows.",
                "geoNote": {"title": "Hotspot", "text": "Young basalt."},
            },
        ],
        "glossary": [
            {"term": "Laccolith", "definition": "A lens-shaped intrusion."},
            {"term": "Evaporite", "definition": "Sediment formed by evaporation."},
        ],
    }


@pytest.fixture
def write_record(tmp_path: Path):
    def _write(raw, name: str = "travelData.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(raw), encoding="utf-8")
        return path

    return _write
