import os
import yaml
from dataclasses import _MISSING_TYPE, Field
from enum import Enum
from typing import Any, Dict, TypeVar

import logging
logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a config is incomplete or describes an unusable geometry."""


class ConfigLoader(yaml.SafeLoader):
    # https://stackoverflow.com/questions/528281/how-can-i-include-a-yaml-file-inside-another
    def __init__(self, stream):
        self._root = os.path.split(getattr(stream, "name", ""))[0]
        super(ConfigLoader, self).__init__(stream)

    def include(self, node):
        filename = os.path.join(self._root, self.construct_scalar(node))
        with open(filename, "r") as f:
            ret = yaml.load(f, ConfigLoader)
        if ret is None:
            raise ConfigError("included file is empty? file: %s" % filename)
        return ret

    def eval(self, node):
        # only arithmetic on literals, e.g. `!eval 8*1024**3`
        expr = self.construct_scalar(node)
        return eval(expr, {"__builtins__": {}}, {})


ConfigLoader.add_constructor("!include", ConfigLoader.include)
ConfigLoader.add_constructor("!eval", ConfigLoader.eval)


T = TypeVar("T")


def dict_to_dataclass(d: Dict[str, Any], cls: T, *, restrict_mode=True) -> T:
    if not hasattr(cls, "__dataclass_fields__"):
        try:
            return cls(d)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"cannot convert {d!r} to {getattr(cls, '__name__', cls)}") from e

    if not isinstance(d, dict):
        raise ConfigError(f"{cls.__name__} expects a mapping, got {d!r}")

    fields: Dict[str, Field] = cls.__dataclass_fields__
    kwargs = {}
    for field_name, field_type in fields.items():
        field_value = d.get(field_name)
        if field_value is not None:
            if field_type.type is None or type(field_value) == field_type.type:
                kwargs[field_name] = field_value
            else:
                kwargs[field_name] = dict_to_dataclass(
                    field_value, field_type.type, restrict_mode=restrict_mode)
        elif not isinstance(field_type.default_factory, _MISSING_TYPE):
            kwargs[field_name] = field_type.default_factory()
        elif not isinstance(field_type.default, _MISSING_TYPE):
            kwargs[field_name] = field_type.default
        elif restrict_mode:
            raise ConfigError(f"required {field_name} is not provided for {cls.__name__}")
        else:
            kwargs[field_name] = None
            logger.warning("required %s is not provided for %s", field_name, cls.__name__)
    return cls(**kwargs)


def load_config(config_path: str, cls: T) -> T:
    with open(config_path) as f:
        data = yaml.load(f, ConfigLoader)
    if data is None:
        raise ConfigError(f"config file is empty: {config_path}")
    config = dict_to_dataclass(data, cls)
    logger.debug("loaded %s from %s", cls.__name__, config_path)
    return config


class BaseEnum(Enum):
    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        value = value.lower()
        for member in cls:
            if member.name.lower() == value:
                return member
        return None

    def __repr__(self):
        return self.name
