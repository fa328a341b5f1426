import random

import pytest
from fastapi.testclient import TestClient

from crp_tools.main import create_app
from crp_tools.services.posts.generator import (
    POST_TEMPLATES,
    RECYCLING_IMAGES,
    InvalidImageSuggestionError,
    InvalidTopicError,
    choose_image,
    generate_post,
    generate_post_text,
    sanitize,
)


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def test_sanitize_strips_angle_brackets():
    assert sanitize("  <b>Clean up</b> day ") == "bClean up/b day"
    assert sanitize(None) == ""


@pytest.mark.parametrize(
    "suggestion, expected",
    [
        ("Overflowing BINS", RECYCLING_IMAGES[0]),
        ("a shipping container", RECYCLING_IMAGES[0]),
        ("plastic drink bottles", RECYCLING_IMAGES[2]),
        ("aluminum", RECYCLING_IMAGES[3]),
        ("our new facility", RECYCLING_IMAGES[4]),
        ("green hills", RECYCLING_IMAGES[5]),
        ("canal at sunset", RECYCLING_IMAGES[3]),
    ],
)
def test_choose_image_keyword_priority(suggestion, expected):
    assert choose_image(suggestion) == expected


def test_choose_image_falls_back_to_random_choice():
    assert choose_image("sunrise", rng=random.Random(3)) in RECYCLING_IMAGES


def test_generate_post_text_interpolates_topic():
    text = generate_post_text("Clean Up Australia Day", "facebook", rng=random.Random(1))

    assert "Clean Up Australia Day" in text
    assert text in {template.replace("{topic}", "Clean Up Australia Day") for template in POST_TEMPLATES["facebook"]}


@pytest.mark.parametrize("platform", ["both", "tiktok"])
def test_unknown_platforms_use_instagram_posts(platform):
    text = generate_post_text("Plastic Free July", platform, rng=random.Random(0))

    assert text in {template.replace("{topic}", "Plastic Free July") for template in POST_TEMPLATES["instagram"]}


@pytest.mark.parametrize("topic", [None, "", "   ", 42])
def test_generate_post_requires_topic(topic):
    with pytest.raises(InvalidTopicError):
        generate_post(topic)


def test_generate_post_without_suggestion_has_no_image():
    post = generate_post("<Cans> for cash", rng=random.Random(0))

    assert post["image_url"] is None
    assert "Cans for cash" in post["text"]


def test_generate_post_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/generate-post",
        json={"topic": "Plastic Free July", "imageSuggestion": "plastic bottles", "platform": "facebook"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert "Plastic Free July" in payload["data"]["text"]
    assert payload["data"]["imageUrl"] == RECYCLING_IMAGES[2]


def test_generate_post_endpoint_omits_missing_image(api_client: TestClient):
    response = api_client.post("/api/generate-post", json={"topic": "Containers for Change"})

    assert response.status_code == 200
    assert "imageUrl" not in response.json()["data"]


def test_generate_post_endpoint_rejects_blank_topic(api_client: TestClient):
    response = api_client.post("/api/generate-post", json={"topic": "  "})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Topic is required and must be a non-empty string"}


def test_generate_post_endpoint_reports_unexpected_errors(api_client: TestClient, monkeypatch):
    from crp_tools.api.routes import posts

    def boom(*args, **kwargs):
        raise RuntimeError("template table missing")

    monkeypatch.setattr(posts, "generate_post", boom)

    response = api_client.post("/api/generate-post", json={"topic": "Anything"})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error occurred while generating content",
    }


@pytest.mark.parametrize("platform", ["twitter", None])
def test_generate_post_endpoint_defaults_to_instagram(api_client: TestClient, platform):
    response = api_client.post("/api/generate-post", json={"topic": "Plastic Free July", "platform": platform})

    assert response.status_code == 200
    text = response.json()["data"]["text"]
    assert text in {template.replace("{topic}", "Plastic Free July") for template in POST_TEMPLATES["instagram"]}


def test_generate_post_rejects_non_text_suggestion():
    with pytest.raises(InvalidImageSuggestionError):
        generate_post("Plastic Free July", image_suggestion=["bins"])


def test_generate_post_endpoint_non_text_suggestion_is_a_server_error(api_client: TestClient):
    response = api_client.post("/api/generate-post", json={"topic": "Plastic Free July", "imageSuggestion": 42})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error occurred while generating content",
    }
