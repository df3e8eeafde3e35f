from __future__ import annotations

import json
import os
from typing import Any

import aiofiles
import aiofiles.os

from .config import settings


async def save_json(name: str, data: Any, output_dir: str | None = None) -> str:
    """Write `data` as indented JSON under the output dir; returns the path written."""
    out_dir = output_dir or settings.output_dir
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, name)
    tmp = path + ".tmp"
    async with aiofiles.open(tmp, "w", encoding="utf-8") as f:
        await f.write(json.dumps(data, ensure_ascii=False, indent=2))
    await aiofiles.os.replace(tmp, path)
    return path


def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
