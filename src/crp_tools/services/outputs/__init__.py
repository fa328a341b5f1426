"""Document output helpers."""

from .docx_template import DocxTemplate, TemplateError

__all__ = ["DocxTemplate", "TemplateError"]
