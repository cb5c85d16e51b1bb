# mhealthgen/domain/data_point.py
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

SCHEMA_NAMESPACE = "omh"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SchemaId:
    name: str
    version: str
    namespace: str = SCHEMA_NAMESPACE

    def to_dict(self) -> Dict[str, str]:
        return {"namespace": self.namespace, "name": self.name, "version": self.version}


@dataclass
class DataPointHeader:
    schema_id: SchemaId
    user_id: str
    source_name: str
    source_creation_date_time: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    creation_date_time: datetime = field(default_factory=_now_utc)
    modality: str = "sensed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "creation_date_time": self.creation_date_time.isoformat(),
            "schema_id": self.schema_id.to_dict(),
            "acquisition_provenance": {
                "source_name": self.source_name,
                "modality": self.modality,
                "source_creation_date_time": self.source_creation_date_time.isoformat(),
            },
            "user_id": self.user_id,
        }


@dataclass
class DataPoint:
    header: DataPointHeader
    body: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"header": self.header.to_dict(), "body": self.body}
