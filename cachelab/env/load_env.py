import os
import pathlib
from typing import Callable, Dict, TypeVar

from dotenv import dotenv_values

from .env import Env, PrimaryType

T = TypeVar("T", bound=Env)

Converters = Dict[str, Callable[[str], PrimaryType]]


def _read_environment(converters: Converters) -> Dict[str, PrimaryType]:
    return {
        name: convert(value)
        for name, convert in converters.items()
        if (value := os.getenv(name))
    }


def _read_env_file(env_file: str, converters: Converters) -> Dict[str, PrimaryType]:
    if not pathlib.Path(env_file).is_file():
        return {}

    # Keys the Env model does not declare are ignored.
    return {
        name: converters[name](value)
        for name, value in dotenv_values(dotenv_path=env_file).items()
        if name in converters and value is not None
    }


def load_env(
    default: type[T] = Env,
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build an Env from, in increasing precedence: environment variables,
    the env file (".env" by default), and the fields explicitly set on
    override. Invalid values raise pydantic.ValidationError.
    """
    converters = default.types_map()

    values = _read_environment(converters)
    values.update(_read_env_file(env_file or ".env", converters))

    if override is None:
        return default(**values)

    values.update(override.model_dump(exclude_unset=True, exclude_none=True))

    return type(override)(**values)
