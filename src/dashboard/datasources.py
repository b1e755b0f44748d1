"""
Data Source Resolver — maps data-source references to configured instances.

Holds the instance settings of every configured query backend and resolves
a ``{type, uid}`` reference into a concrete handle. Lookups accept a uid or
an instance name.

Public API:
    DataSourceInstanceSettings
    DataSourceSrv(instances)
    get_data_source_ref(settings) → DataSourceRef
    get_data_source_srv() / set_data_source_srv(srv)
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from src.dashboard.errors import DataSourceResolutionError
from src.dashboard.schema import DataSourceRef

logger = logging.getLogger(__name__)


class DataSourceInstanceSettings(BaseModel):
    """A configured data-source instance."""
    uid: str
    name: str
    type: str
    is_default: bool = False


def get_data_source_ref(settings: DataSourceInstanceSettings) -> DataSourceRef:
    return DataSourceRef(type=settings.type, uid=settings.uid)


class DataSourceSrv:
    """Registry of data-source instances, keyed by uid."""

    def __init__(self, instances: Optional[Iterable[DataSourceInstanceSettings]] = None) -> None:
        self._lock = threading.Lock()
        self._by_uid: Dict[str, DataSourceInstanceSettings] = {}
        for instance in instances or ():
            self.add(instance)

    def add(self, settings: DataSourceInstanceSettings) -> None:
        with self._lock:
            self._by_uid[settings.uid] = settings
        logger.debug("datasource_added: uid=%s, type=%s", settings.uid, settings.type)

    def list_instances(self) -> List[DataSourceInstanceSettings]:
        with self._lock:
            return list(self._by_uid.values())

    def get_instance_settings(self, uid_or_name: Optional[str]) -> Optional[DataSourceInstanceSettings]:
        """Look up by uid, then by name. Returns None when nothing matches.

        An empty reference resolves to the default instance, if one is marked.
        """
        with self._lock:
            if not uid_or_name:
                return next((s for s in self._by_uid.values() if s.is_default), None)
            settings = self._by_uid.get(uid_or_name)
            if settings is not None:
                return settings
            return next((s for s in self._by_uid.values() if s.name == uid_or_name), None)

    def resolve(self, ref: DataSourceRef) -> DataSourceRef:
        """Resolve a reference to the canonical reference of a configured instance.

        Raises:
            DataSourceResolutionError if the reference matches no instance.
        """
        settings = self.get_instance_settings(ref.uid)
        if settings is None:
            raise DataSourceResolutionError(ref.uid, ref.type)
        if ref.type and settings.type != ref.type:
            logger.warning(
                "datasource_type_mismatch: uid=%s, requested=%s, configured=%s",
                ref.uid, ref.type, settings.type,
            )
        return get_data_source_ref(settings)


_srv: Optional[DataSourceSrv] = None
_srv_lock = threading.Lock()


def get_data_source_srv() -> DataSourceSrv:
    """Return the process-wide resolver, creating an empty one on first use."""
    global _srv
    with _srv_lock:
        if _srv is None:
            _srv = DataSourceSrv()
        return _srv


def set_data_source_srv(srv: Optional[DataSourceSrv]) -> None:
    global _srv
    with _srv_lock:
        _srv = srv
