import asyncio
import json
import os

import values
from invoker import DriverEnv
from log import getLogger
from models import SmbMountModel
from options import OptionSet
from renderers import create_renderer
from rules import ConfigRules
from smb import SmbMounter


lock = asyncio.Lock()
mounts = {}
mounter = None


def get_lock():
    global lock
    return lock


def get_mounts():
    global mounts
    return mounts


def get_env():
    return DriverEnv(getLogger())


def create_mounter():
    rules = ConfigRules().read_conf(
        values.required_options, values.allowed_options, values.default_options
    )
    renderer = create_renderer(values.platform_name, values.scripts_path)
    getLogger().info(f"Initialized {renderer.name} mounter with {rules!r}")
    return SmbMounter(rules, renderer)


def get_mounter() -> SmbMounter:
    global mounter
    if not mounter:
        mounter = create_mounter()
    return mounter


def validate(item: SmbMountModel):
    if not item.source:
        raise ValueError("source not provided")
    if not item.target:
        raise ValueError("target not provided")


async def mount(item: SmbMountModel):
    validate(item)
    await get_mounter().mount(get_env(), item.source, item.target, item.options)
    mounts[item.target] = {
        "source": item.source,
        "options": OptionSet(item.options).masked(),
    }


async def unmount(target: str):
    await get_mounter().unmount(get_env(), target)
    mounts.pop(target, None)


async def init_mounts(init_mounts_path=None):
    init_mounts_path = init_mounts_path or values.init_mounts_path
    log = getLogger()
    if os.path.exists(init_mounts_path):
        log.info("Init mounts ...")
        with open(init_mounts_path) as f:
            mount_configs = json.load(f)
        for mount_config in mount_configs:
            try:
                item = SmbMountModel(**mount_config)
                log.info(f"Mount {item.target} ...")
                async with get_lock():
                    await mount(item)
            except Exception:
                label = mount_config.get("target") if isinstance(mount_config, dict) else mount_config
                log.exception(f"Mount {label!r} failed")
