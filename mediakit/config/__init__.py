"""Configuration: settings, execution context, conditions and presets."""

from mediakit.config.settings import (
    EXT_ARCHIVE,
    EXT_AUDIO,
    EXT_IMAGE,
    EXT_RAW,
    EXT_VIDEO,
    CORRUPTED_SIZE_THRESHOLD,
    HOLDING_DIR_NAME,
)
from mediakit.config.context import (
    ExecutionContext,
    get_context,
    set_context,
    execution_context,
)
from mediakit.config.conditions import (
    ConditionSet,
    build_condition_set,
    load_name_list,
    parse_measure,
)
from mediakit.config.presets import (
    PRESETS,
    PRESET_NAMES,
    TranscodePreset,
    check_arguments,
    format_args,
    get_preset,
    specialize_preset,
)

__all__ = [
    "EXT_ARCHIVE",
    "EXT_AUDIO",
    "EXT_IMAGE",
    "EXT_RAW",
    "EXT_VIDEO",
    "CORRUPTED_SIZE_THRESHOLD",
    "HOLDING_DIR_NAME",
    "ExecutionContext",
    "get_context",
    "set_context",
    "execution_context",
    "ConditionSet",
    "build_condition_set",
    "load_name_list",
    "parse_measure",
    "PRESETS",
    "PRESET_NAMES",
    "TranscodePreset",
    "check_arguments",
    "format_args",
    "get_preset",
    "specialize_preset",
]
