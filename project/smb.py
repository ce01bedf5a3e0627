import os

from errors import CommandError
from errors import SafeError
from filesystem import Filesystem
from invoker import DriverEnv
from invoker import Invoker
from options import OptionSet
from renderers import describe
from renderers import Renderer
from rules import ConfigRules

CHECK_TIMEOUT = 5
RESERVED_OPTIONS = ["source"]


class SmbMounter:
    """Mounts, unmounts, checks and purges SMB shares.

    The rules template is never modified; every mount validates against
    its own copy so concurrent requests cannot see each other's options.
    """

    def __init__(
        self,
        rules: ConfigRules,
        renderer: Renderer,
        invoker: Invoker = None,
        filesystem: Filesystem = None,
    ):
        self.rules = rules
        self.renderer = renderer
        self.invoker = invoker or Invoker()
        self.filesystem = filesystem or Filesystem()

    async def mount(self, env: DriverEnv, source: str, target: str, options: dict):
        log = env.session("smb-mount")
        log.info("start")
        try:
            rules = self.rules.copy()
            try:
                rules.set_entries(OptionSet(options or {}), RESERVED_OPTIONS)
            except SafeError as e:
                log.debug(
                    f"error-parse-entries: {e}",
                    extra={
                        "given_source": source,
                        "given_target": target,
                        "given_options": OptionSet(options or {}).masked(),
                        "config_mounts": repr(rules),
                    },
                )
                raise

            secrets = rules.options.secrets()
            command = self.renderer.render_mount(source, target, rules.options)
            log.debug(f"mount: {describe(command, secrets)}")
            try:
                await self.invoker.invoke(env, command.program, command.args)
            except (CommandError, OSError) as e:
                log.info(f"Mount {target} ... failed")
                raise SafeError(f"Mount {source} on {target} failed: {e}", secrets) from e

            if self.renderer.link_based:
                link = self.renderer.render_link(source, target)
                log.debug(f"link: {describe(link)}")
                try:
                    await self.invoker.invoke(env, link.program, link.args)
                except (CommandError, OSError) as e:
                    log.info(f"Link {target} -> {source} ... failed")
                    raise SafeError(f"Linking {target} to {source} failed: {e}", secrets) from e
            log.info(f"Mount {target} ... successful")
        finally:
            log.info("end")

    async def unmount(self, env: DriverEnv, target: str):
        log = env.session("smb-umount")
        log.info("start")
        try:
            source = None
            if self.renderer.link_based:
                try:
                    source = self.filesystem.readlink(target)
                except OSError as e:
                    raise SafeError(f"Unable to resolve mount {target}: {e}") from e

            command = self.renderer.render_unmount(target, source)
            log.debug(
                f"unmount: {describe(command)}",
                extra={"given_target": target, "given_source": source},
            )
            try:
                await self.invoker.invoke(env, command.program, command.args)
            except (CommandError, OSError) as e:
                log.info(f"Unmount {target} ... failed")
                raise SafeError(f"Unmount {target} failed: {e}") from e

            if self.renderer.link_based:
                try:
                    self.filesystem.remove(target)
                except OSError as e:
                    raise SafeError(f"Unable to remove link {target}: {e}") from e
            log.info(f"Unmount {target} ... successful")
        finally:
            log.info("end")

    async def check(self, env: DriverEnv, name: str, mount_point: str) -> bool:
        log = env.session("smb-check-mountpoint")
        log.info("start")
        try:
            env = env.with_deadline(CHECK_TIMEOUT)
            command = self.renderer.render_check(mount_point)
            log.debug(f"check-mount: {describe(command)}")
            try:
                await self.invoker.invoke(env, command.program, command.args)
            except Exception as e:
                # volumes without a confirmable mount are reported as unmounted
                log.info(f"unable to verify volume {name} ({e})")
                return False
            return True
        finally:
            log.info("end")

    async def purge(self, env: DriverEnv, path: str):
        log = env.session("purge")
        log.info("start")
        try:
            try:
                entries = self.filesystem.read_dir(path)
            except OSError:
                log.exception(f"purge-readdir-failed: {path}")
                return

            for entry in entries:
                # a link whose share is gone no longer reports as a directory
                swept = entry.is_dir or (self.renderer.link_based and entry.is_link)
                if not swept:
                    continue
                await self.purge_entry(env, log, os.path.join(path, entry.name))
        finally:
            log.info("end")

    async def purge_entry(self, env, log, entry_path):
        source = None
        resolved = True
        if self.renderer.link_based:
            try:
                source = self.filesystem.readlink(entry_path)
            except OSError as e:
                resolved = False
                log.warning(f"purge-cannot-resolve-link: {entry_path} ({e})")

        if resolved:
            command = self.renderer.render_purge(entry_path, source)
            try:
                await self.invoker.invoke(env, command.program, command.args)
            except (CommandError, OSError) as e:
                log.warning(f"purge-cannot-unmount: {entry_path} ({e})")

        try:
            if self.renderer.link_based:
                self.filesystem.remove_all(entry_path)
            else:
                self.filesystem.remove(entry_path)
        except OSError:
            log.exception(f"purge-cannot-remove-directory: {entry_path}")
