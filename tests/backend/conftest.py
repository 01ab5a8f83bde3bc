import pytest

from savebox_lib.core import MainThreadDispatcher
from tests.helpers import make_store


@pytest.fixture
def store(tmp_path):
    s = make_store(tmp_path, dispatcher=MainThreadDispatcher())
    yield s
    s.close()
