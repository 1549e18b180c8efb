"""
Gemini service implementation for ColorInsight.
Handles requirement extraction, market search, scheme generation and preview
images using Google's Gemini models.
"""

import base64
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from google import genai
from google.genai import types
from pydantic import ValidationError

from colorinsight.errors import AIResponseError
from colorinsight.models.requirement import Requirement, RequirementExtraction
from colorinsight.models.scheme import ColorScheme
from colorinsight.models.search import SearchResult, Source
from colorinsight.services.ai_service import AIService
from colorinsight.services.response_schemas import REQUIREMENTS_SCHEMA, SCHEMES_SCHEMA
from colorinsight.utils.constants import (
    DEFAULT_ARCHETYPES,
    MAX_SEARCH_SOURCES,
    PREVIEW_ASPECT_RATIO,
    PREVIEW_CONTEXT_REQUIREMENTS,
    REQUIREMENTS_CHAR_LIMIT,
    SCHEME_COUNT,
)
from colorinsight.utils.logger import logger
from colorinsight.utils.utils import dedupe_sources, strip_code_fences, truncate

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


def load_prompt(name: str) -> str:
    with open(PROMPTS_DIR / f"{name}.txt", 'r') as prompt_file:
        return prompt_file.read()


class GeminiService(AIService):
    """Gemini service implementation."""

    def __init__(
        self,
        google_api_key: str,
        model: str,
        image_model: str,
        archetypes: Optional[List[Dict[str, str]]] = None,
    ):
        """
        Initialize the Gemini service.

        Args:
            google_api_key: Google AI API key
            model: Gemini model used for text and JSON responses
            image_model: Gemini model used for preview images
            archetypes: Scheme archetypes (name and brief) requested from the generator
        """
        self.google_api_key = google_api_key
        self.model = model
        self.image_model = image_model
        self.archetypes = list(archetypes or DEFAULT_ARCHETYPES)
        self.gemini_client = genai.Client(api_key=google_api_key)

    def extract_requirements(self, text: str) -> RequirementExtraction:
        """
        Extract the customer name and color requirements from report text using Gemini.

        Args:
            text: Page-marked text of the positioning report, truncated before sending

        Returns:
            Customer name and requirements

        Raises:
            AIResponseError: If the response is empty or does not match the schema
        """
        logger.info(f"Extracting requirements with Gemini from {len(text)} characters of text")

        full_prompt = f"""
        {load_prompt("requirement_extractor")}

        Input Text:
        {truncate(text, REQUIREMENTS_CHAR_LIMIT)}
        Response (JSON):
        """

        config = types.GenerateContentConfig(
            temperature=0.4,
            response_mime_type="application/json",
            response_schema=REQUIREMENTS_SCHEMA,
        )
        response = self.gemini_client.models.generate_content(
            model=self.model,
            contents=full_prompt,
            config=config
        )

        if not response.text:
            raise AIResponseError("AI response empty")

        try:
            extraction = RequirementExtraction.model_validate(json.loads(response.text))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error parsing requirement extraction response: {e}")
            raise AIResponseError("Failed to read requirements from the AI response.") from e

        logger.info(f"Extracted {len(extraction.requirements)} requirements for {extraction.customer_name}")
        return extraction

    def market_search(self, requirements: List[Requirement]) -> SearchResult:
        """
        Run a Google Search grounded market lookup for the requirements.

        Args:
            requirements: Confirmed requirements

        Returns:
            Trends, competitors, keywords and insight, with up to five grounding sources

        Raises:
            AIResponseError: If the response is empty or not a JSON object
        """
        req_text = "; ".join(
            f"{req.text} ({req.summary_en})" if req.summary_en else req.text
            for req in requirements
        )
        logger.info(f"Running grounded market search for {len(requirements)} requirements")

        full_prompt = f"""
        Based on the client's color requirements: "{req_text}"

        {load_prompt("market_search")}
        """

        # JSON mode is not allowed together with the search tool, the text is parsed manually
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )
        response = self.gemini_client.models.generate_content(
            model=self.model,
            contents=full_prompt,
            config=config
        )

        if not response.text:
            raise AIResponseError("Search failed: No response text received from AI.")

        json_str = strip_code_fences(response.text)
        try:
            data = json.loads(json_str)
            if not isinstance(data, dict):
                raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
            data.pop("sources", None)
            result = SearchResult.model_validate(data)
        except (ValueError, ValidationError) as e:
            logger.error(f"Error parsing search response: {e}. Raw text: {json_str[:200]}")
            raise AIResponseError("Failed to parse search results. AI response was not valid JSON.") from e

        sources = dedupe_sources(self._grounding_sources(response), limit=MAX_SEARCH_SOURCES)
        logger.info(f"Search returned {len(result.trends)} trends and {len(sources)} sources")
        return result.model_copy(update={"sources": sources})

    def generate_schemes(
        self, requirements: List[Requirement], search_result: Optional[SearchResult] = None
    ) -> List[ColorScheme]:
        """
        Generate one color scheme per archetype using Gemini.

        Args:
            requirements: Confirmed requirements
            search_result: Market search artifact, or None when the search step was skipped

        Returns:
            Exactly SCHEME_COUNT schemes; weighted scores are left unset

        Raises:
            AIResponseError: If the response is empty, malformed or has the wrong number of schemes
        """
        req_text = "; ".join(req.text for req in requirements)
        if search_result is not None:
            market_context = search_result.model_dump_json(by_alias=True)
        else:
            market_context = "Not available. Rely on current global color forecasts and design trend reports."
        archetype_lines = "\n".join(
            f"{index}. \"{archetype['name']}\" ({archetype['brief']})"
            for index, archetype in enumerate(self.archetypes, start=1)
        )
        logger.info(f"Generating {SCHEME_COUNT} color schemes with Gemini")

        full_prompt = f"""
        {load_prompt("scheme_generator")}

        Archetypes:
        {archetype_lines}

        Context: Client Requirements: "{req_text}". Market Research: {market_context}
        Response (JSON):
        """

        config = types.GenerateContentConfig(
            temperature=0.7,
            response_mime_type="application/json",
            response_schema=SCHEMES_SCHEMA,
        )
        response = self.gemini_client.models.generate_content(
            model=self.model,
            contents=full_prompt,
            config=config
        )

        if not response.text:
            raise AIResponseError("Scheme generation failed")

        try:
            payload = json.loads(strip_code_fences(response.text))
            if not isinstance(payload, list):
                raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")
            schemes = [self._parse_scheme(index, item) for index, item in enumerate(payload)]
        except (ValueError, ValidationError) as e:
            logger.error(f"Error parsing scheme generation response: {e}")
            raise AIResponseError("Scheme generation failed: AI response was not valid JSON.") from e

        if len(schemes) != SCHEME_COUNT:
            logger.error(f"Scheme generator returned {len(schemes)} schemes")
            raise AIResponseError(f"Expected {SCHEME_COUNT} color schemes but received {len(schemes)}.")

        return schemes

    def generate_preview_image(self, scheme: ColorScheme, requirements: List[Requirement]) -> str:
        """
        Generate a 16:9 interior rendering that applies the scheme's palette.

        Args:
            scheme: Scheme whose palette is applied
            requirements: Requirements; the first few describe the scene

        Returns:
            The image as a ``data:<mime>;base64,...`` URI

        Raises:
            AIResponseError: If the response carries no inline image
        """
        context = ", ".join(
            req.summary_en or req.text for req in requirements[:PREVIEW_CONTEXT_REQUIREMENTS]
        )
        logger.info(f"Generating preview image for scheme {scheme.id}")

        full_prompt = f"""
        {load_prompt("preview_image")}

        Subject: {context}

        Color Palette to Apply:
        - Dominant: {scheme.palette.primary}
        - Secondary: {scheme.palette.secondary}
        - Accent: {scheme.palette.accent}
        """

        config = types.GenerateContentConfig(
            response_modalities=["IMAGE", "TEXT"],
            image_config=types.ImageConfig(aspect_ratio=PREVIEW_ASPECT_RATIO),
        )
        response = self.gemini_client.models.generate_content(
            model=self.image_model,
            contents=full_prompt,
            config=config
        )

        if response.candidates and response.candidates[0].content:
            for part in response.candidates[0].content.parts or []:
                inline_data = part.inline_data
                if inline_data and inline_data.data:
                    payload = inline_data.data
                    if isinstance(payload, bytes):
                        payload = base64.b64encode(payload).decode("ascii")
                    return f"data:{inline_data.mime_type or 'image/png'};base64,{payload}"

        raise AIResponseError("Image generation failed")

    @staticmethod
    def _parse_scheme(index: int, item: Any) -> ColorScheme:
        if not isinstance(item, dict):
            raise ValueError(f"Scheme {index + 1} is not a JSON object")
        # The weighted score is always derived locally
        item = {key: value for key, value in item.items() if key != "weightedScore"}
        item["id"] = item.get("id") or str(index + 1)
        return ColorScheme.model_validate(item)

    @staticmethod
    def _grounding_sources(response) -> List[Source]:
        sources = []
        if not response.candidates:
            return sources
        metadata = response.candidates[0].grounding_metadata
        for chunk in (metadata.grounding_chunks if metadata else None) or []:
            web = chunk.web
            if web and web.uri and web.title:
                sources.append(Source(title=web.title, url=web.uri))
        return sources
