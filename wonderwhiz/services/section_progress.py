from typing import Optional
import math
import logging

from wonderwhiz.models.session import TopicSession

logger = logging.getLogger(__name__)

class SectionProgressTracker:
    """Completed sections and learning progress for the active topic"""

    def __init__(self, state: TopicSession, default_total_sections: int = 5):
        self.state = state
        self.default_total_sections = default_total_sections

    @property
    def total_sections(self) -> int:
        return len(self.state.table_of_contents) or self.default_total_sections

    def is_known_section(self, section: str) -> bool:
        return section in self.state.table_of_contents

    def is_completed(self, section: str) -> bool:
        return section in self.state.completed_sections

    def set_current(self, section: Optional[str]) -> None:
        self.state.current_section = section

    def mark_completed(self, section: str) -> bool:
        """
        Record a finished section and recompute progress.
        Returns False when the section was already completed.
        """
        if not self.state.topic_sections_generated:
            raise ValueError(f"No table of contents yet, cannot complete '{section}'")
        if self.state.table_of_contents and not self.is_known_section(section):
            raise ValueError(f"Section '{section}' is not part of the table of contents")

        self.state.current_section = section
        if self.is_completed(section):
            return False

        self.state.completed_sections = self.state.completed_sections + [section]

        # round half up, never backwards within a topic
        progress = min(100, math.floor(len(self.state.completed_sections) / self.total_sections * 100 + 0.5))
        self.state.learning_progress = max(self.state.learning_progress, progress)

        if self.state.table_of_contents and all(
            s in self.state.completed_sections for s in self.state.table_of_contents
        ):
            self.state.learning_complete = True
            self.state.learning_progress = 100

        logger.info(
            f"[Progress] '{section}' completed: {len(self.state.completed_sections)}/{self.total_sections} "
            f"({self.state.learning_progress}%)"
        )
        return True
