"""
Shared fixtures for the triage tests.
"""

import pytest

from meditrack.engine import TriageEngine
from meditrack.knowledge_base import get_knowledge_base


class BrokenKnowledgeBase:
    """Stands in for a knowledge base that failed to load properly."""

    def associations_for(self, symptom):
        raise RuntimeError("knowledge base not loaded")

    def duration_factor(self, duration):
        raise RuntimeError("knowledge base not loaded")


@pytest.fixture(scope="session")
def kb():
    return get_knowledge_base()


@pytest.fixture
def engine(kb):
    return TriageEngine(knowledge_base=kb)


@pytest.fixture
def broken_engine():
    return TriageEngine(knowledge_base=BrokenKnowledgeBase())
