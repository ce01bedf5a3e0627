from contextlib import asynccontextmanager

import utils
from errors import SafeError
from fastapi import FastAPI
from fastapi import Query
from fastapi import Response
from fastapi.responses import JSONResponse
from log import getLogger
from models import PurgeModel
from models import SmbMountModel


@asynccontextmanager
async def lifespan(app: FastAPI):
    utils.get_mounter()
    await utils.init_mounts()
    yield


app = FastAPI(lifespan=lifespan)

log = getLogger()


@app.post("/")
async def post(item: SmbMountModel):
    try:
        utils.validate(item)
    except ValueError as e:
        log.exception("Validation failed")
        return JSONResponse(status_code=400, content={"detail": str(e)})
    async with utils.get_lock():
        if item.target in utils.get_mounts():
            log.warning(f"{item.target} already mounted")
            return JSONResponse(
                status_code=400, content={"detail": f"{item.target} already mounted"}
            )
        try:
            log.info(f"Mount {item.target} ...")
            await utils.mount(item)
        except SafeError as e:
            log.info(f"Mount {item.target} failed: {e}")
            return JSONResponse(status_code=400, content={"detail": str(e)})
    return Response(status_code=204)


@app.get("/")
async def get():
    async with utils.get_lock():
        models = [
            {"target": target, "source": entry["source"], "options": entry["options"]}
            for target, entry in utils.get_mounts().items()
        ]
    return JSONResponse(content=models)


@app.delete("/{target:path}")
async def delete(target: str):
    async with utils.get_lock():
        mounts = utils.get_mounts()
        # path parameters lose the leading slash of unix mount points
        if target not in mounts and f"/{target}" in mounts:
            target = f"/{target}"
        if target not in mounts:
            log.debug(f"{target} not found")
            return JSONResponse(status_code=404, content={"detail": "Mount not found"})
        try:
            log.info(f"Unmount {target} ...")
            await utils.unmount(target)
            log.info(f"Unmount {target} ... successful")
        except SafeError as e:
            log.info(f"Unmount {target} ... failed: {e}")
            return JSONResponse(status_code=400, content={"detail": str(e)})
    return Response(status_code=204)


@app.get("/check/{name}")
async def check(name: str, mount_point: str = Query(...)):
    mounted = await utils.get_mounter().check(utils.get_env(), name, mount_point)
    return JSONResponse(content={"name": name, "mounted": mounted})


@app.post("/purge")
async def purge(item: PurgeModel):
    log.info(f"Purge {item.path} ...")
    await utils.get_mounter().purge(utils.get_env(), item.path)
    return Response(status_code=204)
