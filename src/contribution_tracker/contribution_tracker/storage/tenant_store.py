from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence

from .csv_reader import Record, RecordReader
from .csv_writer import RecordWriter
from .paths import TenantPathResolver


class TenantCsvStore:
    """Read/append/rewrite entity files of one tenant.

    Every call goes through the resolver, so a tenant can only reach files
    inside its own directory.
    """

    def __init__(self, resolver: TenantPathResolver, reader: RecordReader, writer: RecordWriter):
        self._resolver = resolver
        self._reader = reader
        self._writer = writer

    def read_entities(self, tenant_id: str, file_name: str) -> List[Record]:
        return self._reader.read(self._resolver.resolve(tenant_id, file_name))

    def append_entity(
        self,
        tenant_id: str,
        file_name: str,
        record: Mapping[str, object],
        headers: Optional[Sequence[str]] = None,
    ) -> None:
        self._writer.append(self._resolver.resolve(tenant_id, file_name), record, headers)

    def write_entities(
        self,
        tenant_id: str,
        file_name: str,
        records: Iterable[Mapping[str, object]],
        headers: Optional[Sequence[str]] = None,
    ) -> None:
        self._writer.rewrite(self._resolver.resolve(tenant_id, file_name), records, headers)
