"""
File helpers
JSON 文件的原子写入 (临时文件 + rename)
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union


def atomic_write_json(path: Union[str, Path], payload: Any) -> Path:
    """
    写入 JSON 文件, 先写同目录临时文件再 os.replace, 避免中途崩溃留下半个文件

    Args:
        path: 目标文件
        payload: 可 JSON 序列化的对象

    Returns:
        目标文件路径
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2, default=str)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return target


def read_json(path: Union[str, Path]) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
