"""
Abstract base class for AI services used in ColorInsight.
This provides a common interface for different AI models.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from colorinsight.models.requirement import Requirement, RequirementExtraction
from colorinsight.models.scheme import ColorScheme
from colorinsight.models.search import SearchResult


class AIService(ABC):
    """Abstract base class for AI services."""

    @abstractmethod
    def extract_requirements(self, text: str) -> RequirementExtraction:
        """
        Identify the customer and their color requirements in report text.

        Args:
            text: Text extracted from the positioning report

        Returns:
            Customer name and the list of requirements
        """
        pass

    @abstractmethod
    def market_search(self, requirements: List[Requirement]) -> SearchResult:
        """
        Look up design trends and competitors relevant to the requirements.

        Args:
            requirements: Confirmed requirements

        Returns:
            Search artifact with cited sources
        """
        pass

    @abstractmethod
    def generate_schemes(
        self, requirements: List[Requirement], search_result: Optional[SearchResult] = None
    ) -> List[ColorScheme]:
        """
        Generate candidate color schemes with sub-scores.

        Args:
            requirements: Confirmed requirements
            search_result: Optional market search artifact used as extra context

        Returns:
            Generated schemes, without weighted scores
        """
        pass

    @abstractmethod
    def generate_preview_image(self, scheme: ColorScheme, requirements: List[Requirement]) -> str:
        """
        Render a preview image applying a scheme's palette.

        Args:
            scheme: Scheme whose palette should be visualised
            requirements: Requirements used to describe the scene

        Returns:
            Image as a base64 data URI
        """
        pass
