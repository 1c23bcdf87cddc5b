# tests/test_advice.py

import asyncio
from datetime import datetime, timedelta, timezone
import pytest
from openai import APIConnectionError
from survey_api.core.errors import AdviceUnavailable
from survey_api.db.advice_repository import DEFAULT_LIMIT, AdviceRepository, InMemoryAdviceRepository, clamp_page
from survey_api.schemas.advice import AIAdviceRecord
from survey_api.services.advice_service import (
    PATIENT_ADVICE_DISCLAIMER,
    AdvisoryOrchestrator,
    build_user_text,
    normalize_advice_text,
)
from survey_api.services.interpretation import build_result
from survey_api.services.openai_service import AdviceGenerator, OpenAIAdviceGenerator

from conftest import FakeAdviceGenerator


def notes_answers(**overrides):
    answers = {"pain": 6.0, "symptoms": "", "concerns": ""}
    answers.update(overrides)
    return answers


def request(orchestrator, template, answers, **kwargs):
    result = build_result(template, answers["pain"])
    return asyncio.run(orchestrator.request_advice(template, answers, result, **kwargs))


def test_user_text_has_one_line_per_filled_text_answer(notes_template):
    answers = notes_answers(symptoms="  stiff knees  ", concerns="   ")
    assert build_user_text(notes_template, answers) == "Symptoms: stiff knees"


def test_user_text_keeps_template_order(notes_template):
    answers = notes_answers(concerns="walking", symptoms="swelling")
    assert build_user_text(notes_template, answers) == "Symptoms: swelling\nConcerns: walking"


def test_auto_built_text_is_sent_without_caller_text(orchestrator, generator, notes_template):
    advice = request(orchestrator, notes_template, notes_answers(symptoms="swelling"))
    assert advice.user_text == "Symptoms: swelling"
    assert "Symptoms: swelling" in generator.last_prompt
    assert "Survey: Symptom notes (NOTES)" in generator.last_prompt


def test_caller_text_takes_precedence(orchestrator, generator, notes_template):
    advice = request(orchestrator, notes_template, notes_answers(symptoms="swelling"), user_text="  my own words ")
    assert advice.user_text == "my own words"
    assert "my own words" in generator.last_prompt
    assert "swelling" not in generator.last_prompt


def test_advice_carries_result_and_disclaimer(orchestrator, repository, notes_template):
    advice = request(orchestrator, notes_template, notes_answers(), owner_id="user-1")
    assert advice.score == 6.0
    assert advice.category == "marked"
    assert advice.survey_code == "NOTES"
    assert advice.disclaimer == PATIENT_ADVICE_DISCLAIMER
    stored = repository.list_for_user("user-1")
    assert [r.id for r in stored] == [advice.id]
    assert stored[0].details["interpretation"] == "marked"
    assert stored[0].details["breakdown"]["total"] == 6.0


@pytest.mark.parametrize("generator", [
    FakeAdviceGenerator(error=RuntimeError("boom")),
    FakeAdviceGenerator(error=AdviceUnavailable("down")),
    FakeAdviceGenerator(delay=5.0),
    FakeAdviceGenerator(reply="   "),
])
def test_failed_advice_is_not_stored(generator, notes_template):
    repository = InMemoryAdviceRepository()
    orchestrator = AdvisoryOrchestrator(generator, repository, timeout=0.05)
    with pytest.raises(AdviceUnavailable):
        request(orchestrator, notes_template, notes_answers(), owner_id="user-1")
    assert repository.list_for_user("user-1") == []


def test_result_is_unchanged_after_failed_advice(notes_template):
    orchestrator = AdvisoryOrchestrator(FakeAdviceGenerator(error=RuntimeError("boom")), InMemoryAdviceRepository())
    answers = notes_answers()
    result = build_result(notes_template, answers["pain"])
    with pytest.raises(AdviceUnavailable):
        asyncio.run(orchestrator.request_advice(notes_template, answers, result))
    assert result.score == 6.0
    assert result.interpretation == "marked"


def test_repeated_requests_are_not_deduplicated(orchestrator, repository, notes_template):
    first = request(orchestrator, notes_template, notes_answers(), owner_id="user-1")
    second = request(orchestrator, notes_template, notes_answers(), owner_id="user-1")
    assert first.id != second.id
    assert len(repository.list_for_user("user-1")) == 2


def test_history_is_scoped_to_owner(orchestrator, notes_template):
    request(orchestrator, notes_template, notes_answers(), owner_id="user-1")
    request(orchestrator, notes_template, notes_answers(), owner_id="user-2")
    request(orchestrator, notes_template, notes_answers())
    assert len(orchestrator.list_advice("user-1")) == 1
    assert len(orchestrator.list_advice(None)) == 1


def _record(index, created_at, user_id="user-1"):
    return AIAdviceRecord(
        id=f"advice-{index}",
        user_id=user_id,
        survey_code="NOTES",
        score=float(index),
        advice_text=f"advice {index}",
        created_at=created_at,
    )


def test_history_is_newest_first_and_paginated():
    repository = InMemoryAdviceRepository()
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for index in (2, 0, 3, 1):
        repository.create(_record(index, start + timedelta(minutes=index)))
    assert [r.id for r in repository.list_for_user("user-1")] == ["advice-3", "advice-2", "advice-1", "advice-0"]
    assert [r.id for r in repository.list_for_user("user-1", limit=2, offset=1)] == ["advice-2", "advice-1"]
    assert repository.list_for_user("user-1", limit=2, offset=10) == []


def test_equal_timestamps_list_latest_insert_first():
    repository = InMemoryAdviceRepository()
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    repository.create(_record(0, moment))
    repository.create(_record(1, moment))
    assert [r.id for r in repository.list_for_user("user-1")] == ["advice-1", "advice-0"]


@pytest.mark.parametrize("limit, offset, expected", [
    (0, 0, (DEFAULT_LIMIT, 0)),
    (-3, -1, (DEFAULT_LIMIT, 0)),
    (10, 5, (10, 5)),
])
def test_page_clamping(limit, offset, expected):
    assert clamp_page(limit, offset) == expected


def test_model_disclaimer_is_stripped():
    text = "Rest and keep a diary.\n\nImportant: this does not replace a visit to your doctor."
    assert normalize_advice_text(text) == "Rest and keep a diary."


def test_standard_disclaimer_is_stripped():
    assert normalize_advice_text(f"Rest.\n{PATIENT_ADVICE_DISCLAIMER}") == "Rest."


def test_important_without_disclaimer_hint_is_kept():
    text = "Important: drink water regularly."
    assert normalize_advice_text(text) == text


def test_openai_generator_without_key_is_unavailable():
    generator = OpenAIAdviceGenerator(api_key=None)
    with pytest.raises(AdviceUnavailable):
        asyncio.run(generator.generate([]))


def test_openai_errors_become_unavailable(monkeypatch):
    generator = OpenAIAdviceGenerator(api_key="sk-test")

    async def fail(**kwargs):
        raise APIConnectionError(request=None)

    monkeypatch.setattr(generator.client.chat.completions, "create", fail)
    with pytest.raises(AdviceUnavailable):
        asyncio.run(generator.generate([]))


def test_incomplete_backends_cannot_be_constructed():
    class WriteOnlyRepository(AdviceRepository):
        def create(self, record):
            return record

    class SilentGenerator(AdviceGenerator):
        pass

    with pytest.raises(TypeError):
        WriteOnlyRepository()
    with pytest.raises(TypeError):
        SilentGenerator()
