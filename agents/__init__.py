from agents.base import BaseAgent
from agents.extractor import ExtractorAgent
from agents.orchestrator import OrchestratorAgent
from agents.researcher import ResearcherAgent
from agents.validation import ResponseValidationError, ValidationResult

__all__ = [
    "BaseAgent",
    "ExtractorAgent",
    "OrchestratorAgent",
    "ResearcherAgent",
    "ResponseValidationError",
    "ValidationResult",
]
