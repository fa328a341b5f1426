"""Canned social media post generator for the Strong Street Recyclers CRP.

Text and images come from fixed tables; nothing here calls a model.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM = "instagram"

POST_TEMPLATES: dict[str, tuple[str, ...]] = {
    "instagram": (
        """♻️ Did you know that every container you bring to Strong Street Recyclers makes a real difference?

{topic} is just one of the many ways our Baringa community is leading the charge in sustainability! 🌱

Our purpose-built CRP makes it easier than ever - with reverse parking and dedicated spots for each machine. Plus, you get 10 cents for every eligible container! 💚

Come visit us at Aura Business Park and join the Containers for Change movement. Together, we're reducing landfill waste and building a greener future for our local communities.

Open 7 days a week (except public holidays) 📅

#ContainersForChange #StrongStreetRecyclers #Baringa #Sustainability #Recycling #Community #Environment""",
        """🌟 Amazing news from our Strong Street Recyclers community!

{topic} continues to inspire us every day. It's incredible to see how our neighbours in Baringa, Little Mountain, Aroona, Pelican Waters, Bells Creek, and Golden Beach are embracing sustainable living!

Every bottle, can, and container you bring helps reduce waste and supports our local environment. Plus, those 10-cent refunds really add up! 💰

Ready to make a difference? Visit our CRP today and see how easy recycling can be with our convenient facility design.

What's your favourite thing about recycling? Share below! 👇

#Recycling #Community #GreenLiving #ContainersForChange #Queensland #EcoFriendly""",
        """💚 Here's something special about {topic} and our recycling journey...

At Strong Street Recyclers, we believe every small action creates a big impact! Whether you're a regular visitor or thinking about your first trip to our CRP, you're part of something amazing.

Our facility at Aura Business Park is designed with YOU in mind - easy parking, simple process, and friendly service every time. We're open 7 days a week because sustainability doesn't take holidays!

Bring your eligible containers and turn your recycling into cash while helping our beautiful Queensland communities stay clean and green 🌱

#StrongStreetRecyclers #SustainableLiving #Baringa #RecyclingMatters #CommunityFirst #ContainersForChange""",
    ),
    "facebook": (
        """♻️ {topic} reminds us why recycling matters! Every container you bring to Strong Street Recyclers helps our local communities reduce waste and earn cash refunds. Visit our CRP at Aura Business Park, Baringa - open 7 days a week!

#ContainersForChange #Recycling""",
        """Great to see our community embracing {topic}! At Strong Street Recyclers, we make sustainability simple and rewarding. 10 cents per eligible container + helping the environment = a win-win for everyone! 🌱

#StrongStreetRecyclers #Community""",
        """{topic} is close to our hearts at Strong Street Recyclers. Our purpose-built facility in Baringa serves 6 local areas with convenient recycling solutions. Together, we're making a real difference! 💚

#Sustainability #Baringa""",
    ),
}

RECYCLING_IMAGES = (
    "/images/recycling/recycling-bins.jpg",
    "/images/recycling/recycling-symbol.jpg",
    "/images/recycling/plastic-bottles.jpg",
    "/images/recycling/cans-containers.jpg",
    "/images/recycling/sustainable-living.jpg",
    "/images/recycling/environmental-conservation.jpg",
)

# First matching rule wins.
IMAGE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("bin", "container"), RECYCLING_IMAGES[0]),
    (("bottle", "plastic"), RECYCLING_IMAGES[2]),
    (("can", "aluminum"), RECYCLING_IMAGES[3]),
    (("facility", "center"), RECYCLING_IMAGES[4]),
    (("environment", "green"), RECYCLING_IMAGES[5]),
)


class InvalidTopicError(ValueError):
    """The post topic is missing or blank."""


class InvalidImageSuggestionError(TypeError):
    """The image suggestion is present but is not text."""


def sanitize(text: Optional[str]) -> str:
    """Strip angle brackets and surrounding whitespace from user input."""
    if not text:
        return ""
    return text.replace("<", "").replace(">", "").strip()


def generate_post_text(topic: str, platform: str = DEFAULT_PLATFORM, rng: Optional[random.Random] = None) -> str:
    templates = POST_TEMPLATES.get(platform, POST_TEMPLATES[DEFAULT_PLATFORM])
    template = (rng or random).choice(templates)
    return template.replace("{topic}", topic)


def choose_image(suggestion: str, rng: Optional[random.Random] = None) -> str:
    lowered = suggestion.lower()
    for keywords, image in IMAGE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return image
    return (rng or random).choice(RECYCLING_IMAGES)


def generate_post(
    topic: object,
    image_suggestion: object = None,
    platform: Optional[str] = DEFAULT_PLATFORM,
    rng: Optional[random.Random] = None,
) -> dict:
    """Build a post for ``platform``; an image is picked only when a suggestion is given."""
    if not isinstance(topic, str) or not topic.strip():
        raise InvalidTopicError("Topic is required and must be a non-empty string")
    if image_suggestion is not None and not isinstance(image_suggestion, str):
        raise InvalidImageSuggestionError(f"Image suggestion must be a string, got {type(image_suggestion).__name__}")

    clean_topic = sanitize(topic)
    clean_suggestion = sanitize(image_suggestion)

    platform = platform or DEFAULT_PLATFORM
    text = generate_post_text(clean_topic, platform, rng)
    image_url = choose_image(clean_suggestion, rng) if clean_suggestion else None
    logger.info(f"Generated {platform} post for topic '{clean_topic}' (image: {image_url or 'none'})")
    return {"text": text, "image_url": image_url}
