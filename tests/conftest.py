from pathlib import Path

import pytest

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


@pytest.fixture
def example_path():
    def resolve(name):
        return str(EXAMPLES / name)
    return resolve
