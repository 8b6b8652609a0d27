"""
Persistence of generated guides onto Project and Step rows.
"""
import logging
from typing import List, Protocol

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from guide_pipeline.errors import StorageError
from guide_pipeline.types import Guide, QuizAnswers, guide_to_dict
from projects.models import Project, Step as StepRecord

logger = logging.getLogger(__name__)


class GuideStore(Protocol):
    def save_guide(self, project_id: str, guide: Guide, quiz: QuizAnswers) -> None:
        ...


class DjangoGuideStore:
    """Writes the guide document, summary fields and step rows in one transaction"""

    def save_guide(self, project_id: str, guide: Guide, quiz: QuizAnswers) -> None:
        """
        Persist a completed guide.

        Previous step rows of the project are replaced, so a regeneration
        leaves exactly the new guide's steps behind.

        Raises:
            StorageError: if the project is missing or any write fails
        """
        try:
            with transaction.atomic():
                self._update_project(project_id, guide, quiz)
                self._replace_steps(project_id, guide)
        except (DatabaseError, ValidationError) as e:
            logger.error(f"Database error saving guide for project {project_id}: {e}")
            raise StorageError(details=str(e)) from e

        logger.info(f"Saved guide with {len(guide.steps)} steps for project {project_id}")

    def _update_project(self, project_id: str, guide: Guide, quiz: QuizAnswers) -> None:
        updated = Project.objects.filter(pk=project_id).update(
            guide_json=guide_to_dict(guide),
            style=quiz.style or None,
            difficulty=guide.difficulty.value,
            estimated_time=guide.estimated_time or None,
            environmental_score=guide.environmental_score,
            cover_image_url=guide.steps[0].image_url,
        )
        if not updated:
            raise StorageError("Failed to save guide", details=f"Project {project_id} does not exist")

    def _replace_steps(self, project_id: str, guide: Guide) -> None:
        StepRecord.objects.filter(project_id=project_id).delete()
        records: List[StepRecord] = [
            StepRecord(
                project_id=project_id,
                step_number=number,
                title=step.title,
                description=step.description,
                image_url=step.image_url,
                image_prompt=step.image_prompt or '',
                tools_needed=list(step.tools_needed),
                materials_needed=list(step.materials_needed),
                estimated_time=step.estimated_time or '30 minutes',
            )
            for number, step in enumerate(guide.steps, 1)
        ]
        StepRecord.objects.bulk_create(records)
