"""Delivery manifest service exports."""

from .errors import BinCountError, ManifestError, ManifestInputError, RenderError, TemplateFetchError
from .extractor import extract_customers, filter_customers, get_bin_count, row_to_customer
from .renderer import generate_manifest, render_manifest
from .template_source import TemplateSource, get_template_source
from .titles import get_run_title

__all__ = [
    "BinCountError",
    "ManifestError",
    "ManifestInputError",
    "RenderError",
    "TemplateFetchError",
    "TemplateSource",
    "extract_customers",
    "filter_customers",
    "generate_manifest",
    "get_bin_count",
    "get_run_title",
    "get_template_source",
    "render_manifest",
    "row_to_customer",
]
