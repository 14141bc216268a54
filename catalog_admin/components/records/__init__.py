"""Record builder component - product and project snapshots."""

from catalog_admin.components.records.component import (
    RecordsComponent,
    collect_dynamic_specs,
)
from catalog_admin.components.records.models import (
    DeleteRecordInput,
    GetRecordInput,
    ListRecordsInput,
    PublishProductInput,
    PublishProductOutput,
    RecordKind,
    RecordsOutput,
    RecordValidationError,
    SaveProjectInput,
    SaveProjectOutput,
    SectionSelection,
)
from catalog_admin.components.records.ports import RecordStorePort, UploaderPort

__all__ = [
    # Component
    "RecordsComponent",
    "collect_dynamic_specs",
    # Models
    "RecordKind",
    "RecordValidationError",
    "SectionSelection",
    "PublishProductInput",
    "PublishProductOutput",
    "SaveProjectInput",
    "SaveProjectOutput",
    "GetRecordInput",
    "ListRecordsInput",
    "DeleteRecordInput",
    "RecordsOutput",
    # Ports
    "RecordStorePort",
    "UploaderPort",
]
