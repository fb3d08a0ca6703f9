"""Module for Jira field operations and story points discovery."""

import logging
from typing import Any

from ..exceptions import JiraApiError, StoryPointsFieldNotFoundError
from ..logging_config import log_operation
from ..models.jira import JiraField
from ..utils import project_key_from_issue_key
from .constants import (
    COMMON_STORY_POINTS_FIELD_IDS,
    DEFAULT_STORY_ISSUE_TYPE,
    STORY_POINTS_NAME_HINTS,
)
from .issues import IssuesMixin
from .search import SearchMixin

logger = logging.getLogger("mcp-jira.fields")


class FieldsMixin(IssuesMixin, SearchMixin):
    """Mixin for Jira field operations.

    Story points live in a custom field whose id differs between instances,
    so it is discovered per project instead of read from the config. Parent,
    subtasks and epic link keep using the fixed designated fields.
    """

    async def get_fields(self) -> list[JiraField]:
        """
        Get all available fields from Jira.

        Returns:
            Field definitions in the order Jira returns them
        """
        fields = await self.get("field")
        if not isinstance(fields, list):
            msg = f"Unexpected return value type from field list: {type(fields)}"
            logger.error(msg)
            raise TypeError(msg)
        logger.debug(f"Retrieved {len(fields)} fields from Jira")
        return [JiraField.from_api_response(f) for f in fields if isinstance(f, dict)]

    async def get_create_meta(
        self, project_key: str, issue_type: str | None = None
    ) -> dict[str, Any]:
        """
        Get the create screen metadata of a project.

        Args:
            project_key: The project key
            issue_type: Restrict the metadata to this issue type name

        Returns:
            The raw createmeta response
        """
        params: dict[str, Any] = {
            "projectKeys": project_key,
            "expand": "projects.issuetypes.fields",
        }
        if issue_type:
            params["issuetypeNames"] = issue_type
        return await self.get("issue/createmeta", params=params)

    async def get_edit_meta(self, issue_key: str) -> dict[str, Any]:
        """
        Get the fields that can be edited on an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')

        Returns:
            The raw editmeta response
        """
        return await self.get(f"issue/{issue_key}/editmeta")

    async def find_story_points_field(
        self, project_key: str, issue_type: str = DEFAULT_STORY_ISSUE_TYPE
    ) -> str | None:
        """
        Find the id of the story points field of a project.

        The create metadata of the issue type is scanned for a field whose
        name looks like story points. Failing that, an existing issue of that
        type is fetched with field names expanded and a short list of commonly
        used ids is checked against those names.

        Args:
            project_key: The project key
            issue_type: Issue type whose fields are searched

        Returns:
            The field id, or None when nothing matches

        Raises:
            JiraApiError: If the issue probe fails. A failing create metadata
                lookup falls through to the probe.
        """
        with log_operation(
            logger, "find_story_points_field", project_key=project_key
        ):
            try:
                create_meta = await self.get_create_meta(project_key, issue_type)
            except JiraApiError as e:
                logger.warning(
                    f"Create metadata unavailable for {project_key}, probing issues: {e}"
                )
                create_meta = None
            field_id = self._story_points_from_create_meta(create_meta, issue_type)
            if field_id:
                logger.debug(f"Story points field from create metadata: {field_id}")
                return field_id

            field_id = await self._probe_story_points_field(project_key, issue_type)
            if field_id:
                logger.debug(f"Story points field from issue probe: {field_id}")
            else:
                logger.info(f"No story points field found for project {project_key}")
            return field_id

    @staticmethod
    def _story_points_from_create_meta(
        create_meta: Any, issue_type: str
    ) -> str | None:
        if not isinstance(create_meta, dict):
            return None
        projects = create_meta.get("projects")
        if not isinstance(projects, list) or not projects:
            return None

        project = projects[0] if isinstance(projects[0], dict) else {}
        wanted = issue_type.lower()
        for candidate in project.get("issuetypes") or []:
            if not isinstance(candidate, dict):
                continue
            if str(candidate.get("name", "")).lower() != wanted:
                continue
            fields = candidate.get("fields")
            if not isinstance(fields, dict):
                return None
            for field_id, field_info in fields.items():
                if not isinstance(field_info, dict):
                    continue
                name = str(field_info.get("name") or "").lower()
                if any(hint in name for hint in STORY_POINTS_NAME_HINTS):
                    return field_id
            return None
        return None

    async def _probe_story_points_field(
        self, project_key: str, issue_type: str
    ) -> str | None:
        search = await self._search_raw(
            f'project = {project_key} AND issuetype = "{issue_type}"', 1
        )
        issues = search.get("issues") or []
        sample_key = issues[0].get("key") if issues and isinstance(issues[0], dict) else None
        if not sample_key:
            return None

        sample = await self.get(f"issue/{sample_key}", params={"expand": "names"})
        names = sample.get("names") if isinstance(sample, dict) else None
        if not isinstance(names, dict):
            return None

        for field_id in COMMON_STORY_POINTS_FIELD_IDS:
            name = str(names.get(field_id) or "").lower()
            if "story" in name and "point" in name:
                return field_id
        return None

    async def update_story_points(self, issue_key: str, story_points: float) -> str:
        """
        Set the story points of an issue, discovering the field first.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            story_points: The new estimate

        Returns:
            The id of the field that was updated

        Raises:
            StoryPointsFieldNotFoundError: If the project has no discoverable
                story points field
        """
        project_key = project_key_from_issue_key(issue_key)
        field_id = await self.find_story_points_field(
            project_key, DEFAULT_STORY_ISSUE_TYPE
        )
        if not field_id:
            raise StoryPointsFieldNotFoundError(project_key)

        await self.update_issue(issue_key, {field_id: story_points})
        return field_id
