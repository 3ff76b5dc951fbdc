"""
Controlled vocabularies for the candidate pipeline.

Declaration order of PipelineStage is the pipeline order; it is also the
sort order of the PostgreSQL enum type.
"""

import enum


class PipelineStage(str, enum.Enum):
    NEW = "new"
    QUALIFYING = "qualifying"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_DONE = "interview_done"
    TESTS_SCHEDULED = "tests_scheduled"
    TESTS_DONE = "tests_done"
    MOCK_SCHEDULED = "mock_scheduled"
    MOCK_DONE = "mock_done"
    ONBOARDING_ASSIGNED = "onboarding_assigned"
    ONBOARDING_DONE = "onboarding_done"
    PROBATION_START = "probation_start"
    PROBATION_END = "probation_end"

    @property
    def position(self) -> int:
        return STAGE_ORDER.index(self)


class OwnerRole(str, enum.Enum):
    SOURCER = "sourcer"
    INTERVIEWER = "interviewer"
    CHATTING_MANAGERS = "chatting_managers"


STAGE_ORDER = list(PipelineStage)

# Stages after which an interviewer is expected to have left a rating
FEEDBACK_DUE_STAGES = frozenset(
    {
        PipelineStage.INTERVIEW_DONE,
        PipelineStage.TESTS_DONE,
        PipelineStage.MOCK_DONE,
    }
)
