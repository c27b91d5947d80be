"""
matcher — wyszukiwanie i generowanie szablonów w bazie wiedzy.

Publiczne API:
  build_template(kb, structure)     → Template
  TemplateSearcher                  wyszukiwanie (search_template)
  TemplateGenerator                 generowanie (generate, search_or_generate)
  TemplateManager                   generator wiązań (create_template_params)
  ArgumentSet                       uporządkowany zbiór argumentów (tylko dopisywanie)
  GenerationResult, TemplateError   typy wyników / błędów
"""

from .arguments import ArgumentSet
from .generator import GenerationResult, TemplateGenerator
from .params    import TemplateManager
from .searcher  import TemplateSearcher
from .template  import Template, TemplateError, TemplateTriple, build_template

__all__ = [
    "ArgumentSet",
    "GenerationResult",
    "TemplateGenerator",
    "TemplateManager",
    "TemplateSearcher",
    "Template",
    "TemplateError",
    "TemplateTriple",
    "build_template",
]
