import asyncio

import pytest

from mathdoc.config import GeminiSettings, Settings


@pytest.fixture
def settings():
    """Settings with a dummy key so no real configuration is needed."""
    return Settings(gemini=GeminiSettings(api_key="test-key", base_url="https://gemini.test/v1beta"))


@pytest.fixture
def run_async():
    """Runs a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def sample_lines():
    """Typical lines of AI output in text mode."""
    return {
        'heading': '## Question 1',
        'area': r'Area is $\frac{1}{2}bh$ sq units',
        'pythagoras': r'Show that $a^2 + b^2 = c^2$ when $\angle C = 90\degree$.',
        'plain': 'Answer all questions.',
        'odd_dollar': 'It costs $5 per item',
    }


@pytest.fixture
def gemini_payload():
    """Builds a generateContent response body holding 'text'."""
    def build(text):
        return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
    return build
