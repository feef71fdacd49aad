"""Job layer package for workflow orchestration boundaries."""

from .interfaces import JobExecutionResult, JobOrchestratorPort
from .scheduling_job import DownlinkSchedulingJob, SchedulingJobConfig

__all__ = ["JobExecutionResult", "JobOrchestratorPort", "DownlinkSchedulingJob", "SchedulingJobConfig"]
