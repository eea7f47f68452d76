import io

import pytest

from shellcore.interface import BaseReader
from shellcore.session import Session


class ScriptedReader(BaseReader):
    """Reader fed from a list: strings are lines, exceptions are raised."""

    def __init__(self, items, history=None):
        super().__init__(history)
        self.items = list(items)
        self.prompts = []

    async def read_line(self, prompt):
        self.prompts.append(prompt)
        if not self.items:
            raise EOFError
        item = self.items.pop(0)
        if isinstance(item, BaseException) or (
            isinstance(item, type) and issubclass(item, BaseException)
        ):
            raise item
        return item


def make_session(**kwargs):
    kwargs.setdefault("stdin", io.StringIO())
    kwargs.setdefault("stdout", io.StringIO())
    kwargs.setdefault("stderr", io.StringIO())
    return Session(**kwargs)


@pytest.fixture
def session():
    return make_session()
