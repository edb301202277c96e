from __future__ import annotations

from dataclasses import dataclass

import pytest

from pegrt import Parser
from tests.helpers import MATCHERS


@dataclass
class Number:
    digits: str

    def __post_init__(self):
        self.digits = str(self.digits)


@pytest.fixture
def matchers_dir():
    return MATCHERS


@pytest.fixture
def assign_parser():
    return Parser(MATCHERS / "assign.py")


@pytest.fixture
def broken_parser():
    return Parser(MATCHERS / "broken.py")


@pytest.fixture
def number_cls():
    return Number
