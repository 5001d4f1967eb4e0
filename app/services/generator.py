"""Client for the text-generation model that writes the site files.

Talks to any OpenAI-compatible ``/chat/completions`` endpoint.  Configuration
comes from the environment:

``SITE_AI_BASE_URL``  API root (default ``https://api.openai.com/v1``)
``SITE_AI_MODEL``     model name
``SITE_AI_API_KEY``   bearer token (required)
``SITE_AI_TIMEOUT``   request timeout in seconds
"""

import os
from typing import Awaitable, Callable

import httpx

BASE_URL = os.environ.get("SITE_AI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
MODEL = os.environ.get("SITE_AI_MODEL", "gpt-4o-mini")
API_KEY = os.environ.get("SITE_AI_API_KEY", "")
TIMEOUT = float(os.environ.get("SITE_AI_TIMEOUT", "300"))  # seconds

SYSTEM_MESSAGE = (
    "You are an expert web developer. Reply only with fenced code blocks, "
    "one per file."
)

Generate = Callable[[str], Awaitable[str]]


def build_site_prompt(description: str) -> str:
    """Return the prompt asking for a multi-file static site for *description*."""
    return f"""Create a complete, production-ready multi-page site for: {description}

Output each file in a separate fenced code block with the language and path:

```html:index.html
[index page content]
```

```css:styles.css
[global styles]
```

Recommended structure:
- index.html (main page)
- styles.css (all styles)
- script.js (all scripts)
- partials/header.html (reusable header)
- partials/footer.html (reusable footer)

Use <!-- include:partials/header.html --> to include a fragment in a page.
Link assets with relative URLs only (href="styles.css", src="script.js").
Every image needs descriptive alt text; use https://picsum.photos/seed/<keyword>/800/600
for photos.
"""


async def generate(prompt: str) -> str:
    """Send *prompt* to the model and return the raw text of its answer.

    Raises:
        RuntimeError: if no API key is configured or the answer is empty.
        httpx.HTTPError: on network or HTTP errors.
    """
    if not API_KEY:
        raise RuntimeError("SITE_AI_API_KEY is not set.")

    payload = {
        "model": MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": prompt},
        ],
    }
    headers = {"Authorization": f"Bearer {API_KEY}"}

    async with httpx.AsyncClient(timeout=TIMEOUT) as client:
        response = await client.post(f"{BASE_URL}/chat/completions", json=payload, headers=headers)
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError:
            raise RuntimeError("Model response is not valid JSON.")

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise RuntimeError("Model response has no message content.")
    if not content or not content.strip():
        raise RuntimeError("Model returned an empty answer.")
    return content


def get_generator() -> Generate:
    """FastAPI dependency returning the generation function."""
    return generate
