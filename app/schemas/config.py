from pydantic import BaseModel
from typing import Dict, Optional, Union


class ConfigSaveRequest(BaseModel):
    store_id: int = 0
    values: Dict[str, Optional[Union[bool, str]]] = {}


class ConfigSaveResponse(BaseModel):
    section: str
    saved: int
    maintenance_run: bool
