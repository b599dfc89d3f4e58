"""
Inventory ingestion: document parsing, bulk replace and offline CSV tools
"""
from .bulk_replace import BulkReplaceIngestor, BulkReplaceResult, TenantReplaceGuard, replace_guard
from .csv_tools import merge_documents, normalize_document, split_by_tenant, tenant_file_name
from .journal import ReplaceJournal
from .parser import decode_document, parse_inventory_document

__all__ = [
    "BulkReplaceIngestor",
    "BulkReplaceResult",
    "TenantReplaceGuard",
    "replace_guard",
    "ReplaceJournal",
    "decode_document",
    "parse_inventory_document",
    "normalize_document",
    "split_by_tenant",
    "merge_documents",
    "tenant_file_name",
]
