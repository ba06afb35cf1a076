# src/querysnoop/wire_config.py
from __future__ import annotations
import importlib
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from querysnoop.core.errors import InputMissing, InvalidArgument
from querysnoop.pipeline.simulator import WebSearchModel
from querysnoop.pipeline.snooper import Snooper


def _imp(ref: Dict[str, Any], what: str) -> Callable:
    try:
        module, attr = ref["module"], ref["attr"]
    except (TypeError, KeyError) as e:
        raise InvalidArgument(f"{what} needs 'module' and 'attr'") from e
    fn = getattr(importlib.import_module(module), attr)
    if not callable(fn):
        raise InvalidArgument(f"{what} {module}.{attr} is not callable")
    return fn


def build_from_yaml(yaml_path: str, *, out: Optional[Callable[[str], None]] = None) -> WebSearchModel:
    """Read a wiring YAML and return a ready-to-run WebSearchModel.

    ``source`` is resolved relative to the YAML file. ``out`` overrides where
    the Snooper writes (defaults to print).
    """
    path = Path(yaml_path)
    if not path.is_file():
        raise InputMissing("wiring file not found", path)
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    src = data.get("source")
    if not src:
        raise InvalidArgument(f"{path.name}: 'source' is required")
    source = Path(src)
    if not source.is_absolute():
        source = path.parent / source

    model = WebSearchModel(
        source,
        raise_errors=bool(data.get("raise_errors", False)),
        encoding=data.get("encoding"),
    )

    if data.get("snooper", False):
        if out is None:
            Snooper(model)
        else:
            Snooper(model, out=out)

    for i, o in enumerate(data.get("observers") or []):
        what = o.get("name") or f"observers[{i}]"
        model.add_query_observer(
            _imp(o.get("observer"), f"{what}.observer"),
            _imp(o.get("filter"), f"{what}.filter"),
            name=o.get("name"),
        )

    return model
