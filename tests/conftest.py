import logging
import random

import pytest


@pytest.fixture
def rng():
    return random.Random(0x1d15c)


@pytest.fixture
def debug_log(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog
