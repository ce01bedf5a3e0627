import os
import shutil
from collections import namedtuple

DirEntry = namedtuple("DirEntry", ["name", "is_dir", "is_link"], defaults=(False,))


def unlink(path):
    # volume links on windows are directory links, dangling or not
    if os.name == "nt" and os.path.islink(path):
        os.rmdir(path)
    else:
        os.remove(path)


class Filesystem:
    def read_dir(self, path):
        with os.scandir(path) as entries:
            return sorted(
                (
                    DirEntry(entry.name, entry.is_dir(), entry.is_symlink())
                    for entry in entries
                ),
                key=lambda entry: entry.name,
            )

    def remove(self, path):
        if os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            unlink(path)

    def remove_all(self, path):
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            unlink(path)

    def readlink(self, path):
        return os.readlink(path)
