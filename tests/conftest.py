# tests/conftest.py

import asyncio
import pytest
from fastapi.testclient import TestClient
from survey_api.api import deps
from survey_api.db.advice_repository import InMemoryAdviceRepository
from survey_api.main import app
from survey_api.schemas.survey import SurveyTemplate
from survey_api.schemas.user import User
from survey_api.services.advice_service import AdvisoryOrchestrator
from survey_api.services.openai_service import AdviceGenerator
from survey_api.services.template_store import BuiltinTemplateStore

# One boolean worth 1 point and one 0-4 scale worth its raw value.
ASA_SCENARIO = {
    "code": "ASA",
    "name": "ASA scenario",
    "description": "Two-question scenario template",
    "category": "anesthesiology",
    "questions": [
        {
            "section": "main",
            "title": "Main",
            "questions": [
                {"id": "flag", "text": "Systemic disease", "type": "boolean", "score": 1},
                {"id": "scale", "text": "Functional limitation", "type": "scale", "min": 0, "max": 4, "score": 1},
            ],
        }
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 2, "label": "low", "category": "low"},
            {"min": 2, "max": 4, "label": "moderate", "category": "moderate"},
            {"min": 4, "max": None, "label": "high", "category": "high"},
        ]
    },
}

NOTES_SURVEY = {
    "code": "NOTES",
    "name": "Symptom notes",
    "questions": [
        {
            "section": "pain",
            "questions": [
                {"id": "pain", "text": "Pain", "type": "vas", "min": 0, "max": 10, "score": 1},
            ],
        },
        {
            "section": "notes",
            "questions": [
                {"id": "symptoms", "text": "Symptoms", "type": "text"},
                {"id": "concerns", "text": "Concerns", "type": "text"},
            ],
        },
    ],
    "interpretation_rules": {
        "ranges": [
            {"min": 0, "max": 5, "label": "mild", "category": "mild"},
            {"min": 5, "max": 10, "label": "marked", "category": "marked"},
        ]
    },
}

TEST_USER = User(id="user-1", email="patient@clinic.org")


class FakeAdviceGenerator(AdviceGenerator):
    def __init__(self, reply="Keep moving gently and note when the pain changes.", error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate(self, messages):
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][-1].content


@pytest.fixture
def asa_template():
    return SurveyTemplate.model_validate(ASA_SCENARIO)


@pytest.fixture
def notes_template():
    return SurveyTemplate.model_validate(NOTES_SURVEY)


@pytest.fixture
def store():
    return BuiltinTemplateStore([ASA_SCENARIO, NOTES_SURVEY])


@pytest.fixture
def repository():
    return InMemoryAdviceRepository()


@pytest.fixture
def generator():
    return FakeAdviceGenerator()


@pytest.fixture
def orchestrator(generator, repository):
    return AdvisoryOrchestrator(generator, repository, timeout=1.0)


@pytest.fixture
def client(store, repository, generator):
    app.dependency_overrides[deps.get_template_store] = lambda: store
    app.dependency_overrides[deps.get_advice_repository] = lambda: repository
    app.dependency_overrides[deps.get_advice_generator] = lambda: generator
    app.dependency_overrides[deps.get_current_user] = lambda: TEST_USER
    app.dependency_overrides[deps.get_optional_user] = lambda: TEST_USER
    yield TestClient(app)
    app.dependency_overrides.clear()
