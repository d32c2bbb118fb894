"""
Gemini answer generator using Google GenAI SDK (Vertex AI).

The system prompt (with the ranked policy sections) goes into
system_instruction; the recent chat turns are sent as contents.
"""

import asyncio
import logging
import time
from typing import List, Optional

from google import genai
from google.genai import types

from ..exceptions import GenerationError
from ..models import ChatMessage
from .base import BaseGenerator

logger = logging.getLogger(__name__)

# Chat roles -> Gemini content roles
ROLE_MAP = {
    "user": "user",
    "assistant": "model",
}


class GeminiGenerator(BaseGenerator):
    """LLM answer generation with Gemini models"""

    def __init__(
        self,
        model_name: str = "gemini-2.5-flash",
        project_id: Optional[str] = None,
        location: str = "us-central1",
        temperature: float = 0.7,
        max_output_tokens: int = 800,
        client: Optional[genai.Client] = None,
    ):
        """
        Initialize Gemini generator.

        Args:
            model_name: Gemini model to use
            project_id: GCP project ID (required unless client is given)
            location: GCP region
            temperature: Sampling temperature
            max_output_tokens: Answer length limit
            client: Pre-built Gen AI client (tests, shared clients)
        """
        self.model_name = model_name
        self.project_id = project_id
        self.location = location
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        if client is not None:
            self.client = client
            return

        if not project_id:
            raise ValueError(
                "GCP project ID required. Set GCP_PROJECT_ID env var or pass project_id parameter."
            )

        try:
            self.client = genai.Client(vertexai=True, project=project_id, location=location)
            logger.info(f"Gemini generator initialized: {model_name} (project={project_id}, location={location})")
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            raise

    def _build_contents(self, messages: List[ChatMessage]) -> List[types.Content]:
        return [
            types.Content(
                role=ROLE_MAP.get(message.role, "user"),
                parts=[types.Part(text=message.content)],
            )
            for message in messages
        ]

    def _generate_sync(self, system_prompt: str, messages: List[ChatMessage]) -> str:
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=self._build_contents(messages),
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            ),
        )
        text = response.text
        if not text:
            raise GenerationError("Model returned an empty answer")
        return text

    async def generate(self, system_prompt: str, messages: List[ChatMessage]) -> str:
        start = time.monotonic()
        try:
            # SDK call is blocking; keep the event loop free
            answer = await asyncio.to_thread(self._generate_sync, system_prompt, messages)
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Gemini generation failed: {e}")
            raise GenerationError(f"Answer generation failed: {e}") from e

        logger.info(f"Answer generated in {(time.monotonic() - start) * 1000:.0f}ms ({len(answer)} chars)")
        return answer

    def get_model_info(self) -> dict:
        return {
            "name": self.model_name,
            "type": "gemini",
            "parameters": {
                "temperature": self.temperature,
                "max_output_tokens": self.max_output_tokens,
                "location": self.location,
            },
        }
