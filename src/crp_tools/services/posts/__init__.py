"""Social media post service exports."""

from .generator import (
    InvalidImageSuggestionError,
    InvalidTopicError,
    choose_image,
    generate_post,
    generate_post_text,
    sanitize,
)

__all__ = [
    "InvalidImageSuggestionError",
    "InvalidTopicError",
    "choose_image",
    "generate_post",
    "generate_post_text",
    "sanitize",
]
