import shutil
from pathlib import Path

import certifi
import pytest

from app_json_config import get_content_hash

TESTDATA_DIR = Path(__file__).parent / "testdata"


@pytest.fixture
def example_config_bytes() -> bytes:
    return (TESTDATA_DIR / "example_config.json").read_bytes()


@pytest.fixture
def ca_bundle_file(tmp_path):
    """A real PEM bundle copied next to the config files."""
    bundle = tmp_path / "example_cabundle.pem"
    shutil.copyfile(certifi.where(), bundle)
    return bundle


@pytest.fixture
def example_config_file(tmp_path, ca_bundle_file):
    config_file = tmp_path / "example_config.json"
    shutil.copyfile(TESTDATA_DIR / "example_config.json", config_file)
    return config_file


@pytest.fixture(autouse=True)
def reset_content_hash():
    get_content_hash()._reset_for_testing()
    yield
    get_content_hash()._reset_for_testing()
