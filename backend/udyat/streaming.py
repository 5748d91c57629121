import asyncio
import os
from typing import AsyncGenerator


def chunk_delay() -> float:
    return float(os.getenv("STREAM_CHUNK_DELAY", "0.05"))


async def stream_words(text: str, delay: float = 0.05) -> AsyncGenerator[str, None]:
    """Yield text one space-separated chunk at a time."""
    for chunk in text.split(" "):
        yield chunk + " "
        if delay:
            await asyncio.sleep(delay)
