from typing import Dict
from typing import Union

from pydantic import BaseModel
from pydantic import StrictBool
from pydantic import StrictInt


class SmbMountModel(BaseModel):
    source: str
    target: str
    options: Dict[str, Union[StrictBool, StrictInt, str]] = {}


class PurgeModel(BaseModel):
    path: str
