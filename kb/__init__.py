"""
kb — grafowa baza wiedzy ProveGraph.

Publiczne API:
  KnowledgeBase               magazyn węzłów i łuków (w pamięci)
  InvalidElementError         operacja na nieistniejącym elemencie
  load_kb_json(path)          → KnowledgeBase
  load_kb_dict(data)          → KnowledgeBase
  dump_kb_dict(kb)            → dict
  KnowledgeBaseFormatError    błąd formatu pliku bazy
"""

from .store  import InvalidElementError, KnowledgeBase
from .loader import KnowledgeBaseFormatError, dump_kb_dict, load_kb_dict, load_kb_json

__all__ = [
    "KnowledgeBase",
    "InvalidElementError",
    "KnowledgeBaseFormatError",
    "load_kb_json",
    "load_kb_dict",
    "dump_kb_dict",
]
