import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from committee_access.io.fixture_loader import load_store

FIXTURES = ROOT / "examples" / "committees.yaml"
POLICY = ROOT / "examples" / "policy.yaml"

PARIS_8 = "515a56c0-bde8-56ef-b90c-4745b1c93818"
MARSEILLE_3 = "182d8586-8b05-4b70-a727-704fa701e816"
DAMMARIE = "b0cd0e52-a5a4-410b-bba3-37afdd326a0a"

FOREIGNER = "313bd28f-efc8-57c9-8ab7-2106c8be9697"
JACQUES = "a046adbe-9c7b-56a9-a676-6151a6785dda"
FRANCIS = "29461c49-6316-5be1-9ac3-17816bf2d819"
GISELE = "cd76b8cf-af20-4976-8dd9-eb067a2f30c7"
CARL = "e6977a4d-2646-5f6c-9c82-88e58dca8458"
LUCIE = "41af5f3f-3e19-4a56-bd5f-a9b2d3b1e4c1"
BENJAMIN = "b4219d47-3138-5efd-9762-2ef9f9495084"


@pytest.fixture
def store():
    return load_store(str(FIXTURES))
