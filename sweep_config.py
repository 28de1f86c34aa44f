"""
Sweep configuration file (JSON):

  {"hardware": {<hw>: {<op>: {<mode>: {
      "characterisation_parameters": {min_iterations, max_iterations, error_margin, confidence},
      "parameters": {filter, in_c, in_s, kx, ky, stride: [int], maximum_complexity: int},
      "modes": [str]}}}}}

Only parameters feed the sweep; the rest is carried through for the caller.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Union

from pydantic import BaseModel, ValidationError

DEFAULT_HARDWARE = "MyriadX"
DEFAULT_OPERATION = "Conv2D"
DEFAULT_MODE = "timing"


class SweepConfigError(Exception):
    """Configuration could not be turned into sweep axes. Fatal to the run."""

    def __init__(self, message: str, path: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class ConfigNotFound(SweepConfigError):
    """Config file does not exist."""


class ConfigMalformed(SweepConfigError):
    """Config file is not JSON or does not match the expected shape."""


class ConfigKeyMissing(SweepConfigError):
    """hardware / operation / mode path is absent."""


class CharacterisationParameters(BaseModel):
    min_iterations: int
    max_iterations: int
    error_margin: float
    confidence: float


class Conv2DParameters(BaseModel):
    filter: List[int]
    in_c: List[int]
    in_s: List[int]
    kx: List[int]
    ky: List[int]
    stride: List[int]
    maximum_complexity: int


class ModeEntry(BaseModel):
    characterisation_parameters: CharacterisationParameters
    parameters: Conv2DParameters
    modes: List[str] = []


class SweepFile(BaseModel):
    # hardware → operation → mode
    hardware: Dict[str, Dict[str, Dict[str, ModeEntry]]]


def load_config(path: Union[str, Path]) -> SweepFile:
    path = Path(path)
    if not path.is_file():
        raise ConfigNotFound("config file not found", str(path))
    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigMalformed(f"invalid JSON ({e})", str(path)) from e
    try:
        return SweepFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigMalformed(f"unexpected config shape ({e.error_count()} errors)", str(path)) from e


def resolve(config: SweepFile, hardware: str = DEFAULT_HARDWARE, operation: str = DEFAULT_OPERATION,
            mode: str = DEFAULT_MODE) -> ModeEntry:
    node = config.hardware
    walked = ["hardware"]
    for key in (hardware, operation, mode):
        walked.append(key)
        if key not in node:
            raise ConfigKeyMissing("missing config key", "/".join(walked))
        node = node[key]
    return node


def load_conv2d_parameters(path: Union[str, Path], hardware: str = DEFAULT_HARDWARE,
                           operation: str = DEFAULT_OPERATION, mode: str = DEFAULT_MODE) -> Conv2DParameters:
    return resolve(load_config(path), hardware, operation, mode).parameters
