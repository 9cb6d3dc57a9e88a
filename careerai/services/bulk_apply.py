import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from careerai.config import settings
from careerai.core.actions import Action
from careerai.core.errors import ConfigError, DispatchError
from careerai.services.normalizer import normalize

logger = logging.getLogger(__name__)

DispatchFn = Callable[[Action, dict], str]
SaveFn = Callable[[str, dict, str], Any]


@dataclass
class BulkApplyFailure:
    index: int
    title: str
    step: str  # cover_letter | save
    error: str


@dataclass
class BulkApplyReport:
    processed: int = 0
    saved: int = 0
    failures: list[BulkApplyFailure] = field(default_factory=list)
    records: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "saved": self.saved,
            "failures": [vars(f) for f in self.failures],
        }


def _job_dict(job: Any) -> dict:
    if hasattr(job, "model_dump"):
        return job.model_dump()
    return dict(job)


def run_bulk_apply(
    jobs: list,
    resume_text: str,
    user_id: str,
    *,
    dispatch_fn: DispatchFn,
    save_fn: SaveFn,
    max_jobs: int | None = None,
) -> BulkApplyReport:
    """
    Generate a cover letter and save one application record per job, one job at a time.

    A failed cover letter or a failed save is logged and recorded on the report, then the
    loop moves on. Only ConfigError stops the batch, since every later dispatch would fail too.
    """
    limit = settings.bulk_apply_max_jobs if max_jobs is None else max_jobs
    batch = list(jobs or [])[: max(0, limit)]
    report = BulkApplyReport()
    logger.info("Bulk apply started for user=%s jobs=%d (of %d)", user_id, len(batch), len(jobs or []))

    for index, job in enumerate(batch):
        job_data = _job_dict(job)
        title = str(job_data.get("title") or "")
        report.processed += 1

        try:
            raw = dispatch_fn(Action.GENERATE_COVER_LETTER, {"job": job_data, "resume_text": resume_text})
        except ConfigError:
            raise
        except DispatchError as e:
            logger.warning("Bulk apply: cover letter failed user=%s job=%d title=%r: %s", user_id, index, title, e)
            report.failures.append(BulkApplyFailure(index, title, "cover_letter", str(e)))
            continue
        cover_letter = normalize(Action.GENERATE_COVER_LETTER, raw).value

        try:
            record = save_fn(user_id, job_data, cover_letter)
        except Exception as e:
            logger.exception("Bulk apply: saving application failed user=%s job=%d title=%r: %s", user_id, index, title, e)
            report.failures.append(BulkApplyFailure(index, title, "save", str(e)))
            continue
        report.saved += 1
        report.records.append(record)

    logger.info(
        "Bulk apply finished for user=%s processed=%d saved=%d failed=%d",
        user_id,
        report.processed,
        report.saved,
        len(report.failures),
    )
    return report
