"""Form catalog exports."""

from .catalog_models import CatalogForm
from .catalog_reader import CatalogError, FormCatalog, load_form_catalog, parse_submission_record

__all__ = [
    "CatalogError",
    "CatalogForm",
    "FormCatalog",
    "load_form_catalog",
    "parse_submission_record",
]
