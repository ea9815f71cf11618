import json
import logging
import re
from typing import TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from app.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _extract_fenced_block(text: str) -> str | None:
    blocks = re.findall(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL | re.IGNORECASE)
    return blocks[0].strip() if blocks else None


def _extract_balanced_json_object(text: str) -> str | None:
    """Best-effort extraction of the first balanced top-level JSON object."""
    start_idx = text.find("{")
    if start_idx == -1:
        return None

    depth = 0
    in_string = False
    escape = False
    for i in range(start_idx, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]
    return None


def structured_text_candidates(raw_text: str) -> list[str]:
    """Ordered, de-duplicated substrings of a model reply that may parse as JSON."""
    text = (raw_text or "").strip()
    if not text:
        return []

    candidates = [_extract_fenced_block(text), text, _extract_balanced_json_object(text)]

    # Some models prefix the object with a bare "json" token.
    if text.lower().startswith("json"):
        trimmed = text[4:].lstrip(": \n\r\t")
        candidates += [trimmed, _extract_balanced_json_object(trimmed)]

    return list(dict.fromkeys(c.strip() for c in candidates if c and c.strip()))


class LLMClient:
    """Provider-agnostic LLM client speaking the OpenAI chat completions API."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.client = AsyncOpenAI(
            base_url=base_url or settings.resolved_llm_base_url,
            api_key=api_key or settings.resolved_llm_api_key,
        )

    def _chat_completion_kwargs(self, *, temperature: float | None) -> dict:
        # Reasoning model families reject non-default temperature values.
        if self.model_name.lower().startswith(("gpt-5", "o1", "o3")):
            return {}
        if temperature is None:
            return {}
        return {"temperature": temperature}

    async def _complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            **self._chat_completion_kwargs(temperature=temperature),
        )
        if not getattr(response, "choices", None):
            logger.error("Received no choices from %s: %s", self.model_name, response)
            raise ValueError(
                f"Provider {self.model_name} returned no output. Try again or change model."
            )
        return response.choices[0].message.content or ""

    @staticmethod
    def _parse(text_response: str, response_schema: type[T]) -> T:
        candidates = structured_text_candidates(text_response)
        if not candidates:
            raise ValueError("Model returned empty content for structured response")
        parse_errors: list[str] = []
        for candidate in candidates:
            try:
                return response_schema.model_validate(json.loads(candidate, strict=False))
            except (json.JSONDecodeError, ValidationError) as candidate_error:
                parse_errors.append(str(candidate_error))
        raise ValueError(
            "Unable to parse structured response: " + " | ".join(parse_errors[:3])
        )

    async def generate_structured(
        self, system_prompt: str, user_prompt: str, response_schema: type[T]
    ) -> T:
        """
        Generate a response matching the given Pydantic schema.

        The schema is injected into the system prompt rather than relying on a
        provider JSON mode. One request is issued; an unparseable reply raises
        ValueError and transport errors propagate unchanged.
        """
        schema_json = json.dumps(response_schema.model_json_schema())
        augmented_system_prompt = (
            f"{system_prompt}\n\n"
            "CRITICAL: You must respond in ONLY valid JSON format matching the following JSON Schema. "
            "Do not include markdown code blocks (```json) or any conversational text around the JSON.\n\n"
            f"EXPECTED SCHEMA:\n{schema_json}"
        )

        logger.info("Issuing structured request to model %s...", self.model_name)
        text_response = await self._complete(
            augmented_system_prompt, user_prompt, settings.LLM_TEMPERATURE
        )
        try:
            result = self._parse(text_response, response_schema)
        except ValueError as e:
            logger.error("Error parsing structured LLM response from %s: %s", self.model_name, e)
            raise
        logger.info("Received structured response from %s.", self.model_name)
        return result
