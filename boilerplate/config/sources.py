"""Settings source mapping prefixed environment variables onto config sections."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Type, get_args

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_settings import PydanticBaseSettingsSource

from boilerplate.core.exceptions import LoadError

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings

ENV_PREFIX = "BOILERPLATE_"

logger = logging.getLogger(__name__)


def _section_model(annotation: Any) -> Optional[Type[BaseModel]]:
    """Return the model class wrapped by ``Optional[Section]`` style annotations."""
    for candidate in get_args(annotation) or (annotation,):
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


def _field_keys(model: Type[BaseModel]) -> Dict[str, str]:
    """Map every accepted env key of ``model`` to the key used for validation."""
    keys: Dict[str, str] = {}
    for name, info in model.model_fields.items():
        keys[name] = name
        if info.alias:
            keys[info.alias.lower()] = info.alias
    return keys


class PrefixedEnvSettingsSource(PydanticBaseSettingsSource):
    """Read ``<PREFIX><SECTION>_<FIELD>`` variables into nested section dicts.

    The prefix is stripped and the remainder lowercased. Both ``.`` and ``_``
    separate the section from the field, so ``BOILERPLATE_SERVER.PORT`` and
    ``BOILERPLATE_SERVER_PORT`` land on the same value. Section and field
    names may themselves contain underscores (``health_checks``,
    ``max_open_conns``); matching is done against the schema rather than by
    splitting on every delimiter. Empty values count as unset.
    """

    def __init__(
        self,
        settings_cls: Type[BaseSettings],
        environ: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self.prefix: str = self.config.get("env_prefix", ENV_PREFIX)
        self.environ = environ
        # (env key, model key, accepted field keys); longest section first so
        # a section never shadows a longer one sharing its leading word.
        self._layout: List[Tuple[str, str, Dict[str, str]]] = []
        for name, info in settings_cls.model_fields.items():
            model = _section_model(info.annotation)
            if model is None:
                continue
            model_key = info.alias or name
            self._layout.append((model_key.lower(), model_key, _field_keys(model)))
        self._layout.sort(key=lambda entry: len(entry[0]), reverse=True)
        self._data: Dict[str, Dict[str, str]] | None = None

    def _read_environ(self) -> Dict[str, str]:
        try:
            source = os.environ if self.environ is None else self.environ
            return {key: value for key, value in source.items() if key.startswith(self.prefix)}
        except (OSError, UnicodeError) as exc:
            raise LoadError(f"failed to read environment: {exc}") from exc

    def _resolve(self, key: str) -> Optional[Tuple[str, str]]:
        for section_key, model_key, fields in self._layout:
            if not key.startswith(section_key + "_"):
                continue
            field = fields.get(key[len(section_key) + 1 :])
            if field is not None:
                return model_key, field
        return None

    def _collect(self) -> Dict[str, Dict[str, str]]:
        data: Dict[str, Dict[str, str]] = {}
        for env_name, raw in self._read_environ().items():
            if raw == "":
                continue
            key = env_name[len(self.prefix) :].lower().replace(".", "_")
            target = self._resolve(key)
            if target is None:
                logger.debug("Ignoring unrecognised variable %s", env_name)
                continue
            section, field = target
            data.setdefault(section, {})[field] = raw
        return data

    @property
    def data(self) -> Dict[str, Dict[str, str]]:
        if self._data is None:
            self._data = self._collect()
        return self._data

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        key = field.alias or field_name
        return self.data.get(key), key, True

    def __call__(self) -> Dict[str, Any]:
        data = self.data
        logger.debug(
            "Read %d environment value(s) with prefix %s",
            sum(len(values) for values in data.values()),
            self.prefix,
            extra={"sections": sorted(data)},
        )
        return {section: dict(values) for section, values in data.items()}


__all__ = ["ENV_PREFIX", "PrefixedEnvSettingsSource"]
