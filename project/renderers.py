import platform
import posixpath
from abc import ABC
from abc import abstractmethod
from collections import namedtuple

from errors import ConfigError
from errors import mask_secrets
from options import escape_commas

Command = namedtuple("Command", ["program", "args"])


def describe(command: Command, secrets=()):
    return mask_secrets(" ".join([command.program] + list(command.args)), secrets)


class Renderer(ABC):
    """Turns validated options and paths into mount utility invocations.

    ``link_based`` renderers attach the remote share without a local
    mount point and provide ``render_link``; the facade then links the
    target to the share and reads that link back on unmount and purge.
    """

    name = None
    link_based = False

    @abstractmethod
    def render_mount(self, source, target, options) -> Command:
        pass

    @abstractmethod
    def render_unmount(self, target, source=None) -> Command:
        pass

    @abstractmethod
    def render_check(self, mount_point) -> Command:
        pass

    @abstractmethod
    def render_purge(self, path, source=None) -> Command:
        pass


class CifsRenderer(Renderer):
    name = "unix"

    def mount_options(self, options):
        rendered = []
        for key in ("username", "password"):
            if key in options:
                rendered.append(f"{key}={escape_commas(options[key])}")
        for key, value in options.rendered_items():
            if key in ("username", "password"):
                continue
            if value is True:
                rendered.append(key)
            elif value is False or value is None:
                continue
            else:
                rendered.append(f"{key}={value}")
        if options.read_only:
            rendered.append("ro")
        return rendered

    def render_mount(self, source, target, options):
        args = ["-t", "cifs"]
        mount_options = self.mount_options(options)
        if mount_options:
            args += ["-o", ",".join(mount_options)]
        args += [source, target]
        return Command("mount", args)

    def render_unmount(self, target, source=None):
        return Command("umount", ["-l", target])

    def render_check(self, mount_point):
        return Command("mountpoint", ["-q", mount_point])

    def render_purge(self, path, source=None):
        return Command("umount", ["-l", "-f", path])


class PowerShellRenderer(Renderer):
    name = "windows"
    link_based = True

    def __init__(self, scripts_path):
        self.scripts_path = scripts_path

    def script(self, name):
        return ["-file", posixpath.join(self.scripts_path, name)]

    def render_mount(self, source, target, options):
        args = self.script("mounter.ps1")
        for key in ("username", "password"):
            if key in options:
                args += [f"-{key}", str(options[key])]
        args += ["-remotePath", source, "-localPath", target]
        return Command("powershell.exe", args)

    def render_link(self, source, target):
        return Command("cmd", ["/c", "mklink", "/d", target, source])

    def render_unmount(self, target, source=None):
        return Command("powershell.exe", self.script("unmounter.ps1") + ["-remotePath", source])

    def render_check(self, mount_point):
        return Command("powershell.exe", self.script("check_mount.ps1") + ["-remotePath", mount_point])

    def render_purge(self, path, source=None):
        return self.render_unmount(path, source)


def detect_platform():
    system = platform.system().lower()
    if system == "windows":
        return "windows"
    elif system in ("linux", "darwin"):
        return "unix"
    raise ConfigError(f"Platform {system} not supported for SMB mounting")


def create_renderer(platform_name, scripts_path=None) -> Renderer:
    if platform_name == "auto":
        platform_name = detect_platform()

    if platform_name == "unix":
        return CifsRenderer()
    elif platform_name == "windows":
        if not scripts_path:
            raise ConfigError("A scripts path is required for the windows renderer")
        return PowerShellRenderer(scripts_path)
    raise ConfigError(f"No renderer implementation for platform: {platform_name}")
