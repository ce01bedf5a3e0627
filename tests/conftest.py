"""
Pytest configuration and shared fakes for the invoker and filesystem.
"""

import logging

import pytest

from filesystem import DirEntry
from invoker import DriverEnv
from rules import ConfigRules


class FakeInvoker:
    """Records every invocation; ``errors`` maps a call index to an exception."""

    def __init__(self):
        self.calls = []
        self.errors = {}
        self.error = None

    async def invoke(self, env, command, args):
        index = len(self.calls)
        self.calls.append((env, command, list(args)))
        error = self.errors.get(index, self.error)
        if error:
            raise error
        return b""

    @property
    def call_count(self):
        return len(self.calls)

    def args_for_call(self, index):
        return self.calls[index]


class FakeFilesystem:
    def __init__(self):
        self.entries = []
        self.read_dir_error = None
        self.links = {}
        self.remove_calls = []
        self.remove_all_calls = []
        self.remove_error = None

    def read_dir(self, path):
        if self.read_dir_error:
            raise self.read_dir_error
        return list(self.entries)

    def remove(self, path):
        self.remove_calls.append(path)
        if self.remove_error:
            raise self.remove_error

    def remove_all(self, path):
        self.remove_all_calls.append(path)
        if self.remove_error:
            raise self.remove_error

    def readlink(self, path):
        if path not in self.links:
            raise FileNotFoundError(2, "No such file or directory", path)
        return self.links[path]


@pytest.fixture
def env():
    return DriverEnv(logging.getLogger("smb-mounter-test"))


@pytest.fixture
def fake_invoker():
    return FakeInvoker()


@pytest.fixture
def fake_fs():
    return FakeFilesystem()


def make_rules(required="", allowed="", defaults=""):
    return ConfigRules().read_conf(required, allowed, defaults)


def dir_entry(name, is_dir=True, is_link=False):
    return DirEntry(name, is_dir, is_link)
