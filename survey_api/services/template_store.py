# survey_api/services/template_store.py

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from postgrest.exceptions import APIError
from supabase import Client

from survey_api.core.errors import TemplateNotFound
from survey_api.schemas.survey import SurveyTemplate, SurveyTemplateSummary

logger = logging.getLogger(__name__)


class TemplateStore(ABC):
    """
    Read-only source of survey templates.
    """

    @abstractmethod
    def get_template(self, code: str) -> SurveyTemplate:
        ...

    @abstractmethod
    def list_templates(self) -> List[SurveyTemplateSummary]:
        ...


class BuiltinTemplateStore(TemplateStore):
    """
    Serves templates validated once from in-process definitions.

    Args:
        definitions: Template definitions in their JSON form.
    """

    def __init__(self, definitions: Iterable[dict]):
        self._templates: Dict[str, SurveyTemplate] = {}
        for definition in definitions:
            template = SurveyTemplate.model_validate(definition)
            if template.code in self._templates:
                raise ValueError(f"Duplicate template code: {template.code}")
            self._templates[template.code] = template
        logger.info(f"Loaded {len(self._templates)} built-in survey templates")

    def get_template(self, code: str) -> SurveyTemplate:
        template = self._templates.get(code)
        if template is None or not template.is_active:
            logger.warning(f"Survey template not found: {code}")
            raise TemplateNotFound(f"Survey template {code} not found")
        return template

    def list_templates(self) -> List[SurveyTemplateSummary]:
        active = [t for t in self._templates.values() if t.is_active]
        return [t.summary() for t in sorted(active, key=lambda t: t.name)]


class SupabaseTemplateStore(TemplateStore):
    """
    Reads active templates from the ``survey_templates`` table.
    """

    table = "survey_templates"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_template(self, code: str) -> SurveyTemplate:
        try:
            response = (
                self.supabase.table(self.table)
                .select("*")
                .eq("code", code)
                .eq("is_active", True)
                .limit(1)
                .execute()
            )
        except APIError as e:
            logger.error(f"Supabase API error while fetching template {code}: {str(e)}")
            raise
        if not response.data:
            logger.warning(f"Survey template not found: {code}")
            raise TemplateNotFound(f"Survey template {code} not found")
        return SurveyTemplate.model_validate(response.data[0])

    def list_templates(self) -> List[SurveyTemplateSummary]:
        response = (
            self.supabase.table(self.table)
            .select("id, code, name, description, category")
            .eq("is_active", True)
            .order("name")
            .execute()
        )
        return [SurveyTemplateSummary.model_validate(row) for row in response.data or []]
