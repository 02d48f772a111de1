"""
APScheduler configuration for background jobs.

Jobs open their own database session via get_db_session, so a failing run
rolls back on its own and never affects request handling.
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.asyncio import AsyncIOExecutor

from vendops.config import settings

logger = logging.getLogger(__name__)

# Job stores
jobstores = {
    'default': MemoryJobStore()
}

# Executors
executors = {
    'default': AsyncIOExecutor(),
}

# Job defaults
job_defaults = {
    'coalesce': True,  # Combine multiple pending executions into one
    'max_instances': 1,  # Only one instance of each job at a time
    'misfire_grace_time': 3600,
}

# Create scheduler
scheduler = AsyncIOScheduler(
    jobstores=jobstores,
    executors=executors,
    job_defaults=job_defaults,
    timezone=settings.SCHEDULER_TIMEZONE
)


async def run_commission_payouts():
    """Scheduler entry point for the monthly payout snapshot."""
    from vendops.database import get_db_session
    from vendops.jobs.commission_jobs import run_monthly_payouts_job

    try:
        async with get_db_session() as db:
            result = await run_monthly_payouts_job(db)
        logger.info(
            f"Job 'commission_payouts' completed: {result['payouts']} payouts "
            f"for {result['period_start']}..{result['period_end']}"
        )
    except Exception as e:
        logger.error(f"Job 'commission_payouts' failed: {e}")


def start_scheduler():
    """Start the background job scheduler."""
    if not scheduler.running:
        # Snapshot last month's commissions into payouts
        scheduler.add_job(
            run_commission_payouts,
            'cron',
            day=settings.PAYOUT_JOB_DAY,
            hour=settings.PAYOUT_JOB_HOUR,
            minute=0,
            id='commission_payouts',
            name='Monthly Commission Payouts',
            replace_existing=True,
        )

        scheduler.start()
        logger.info("Background job scheduler started")

        for job in scheduler.get_jobs():
            logger.info(f"Scheduled job: {job.name} - Next run: {job.next_run_time}")


def shutdown_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Background job scheduler stopped")


def get_job_status():
    """Get status of all scheduled jobs."""
    jobs = scheduler.get_jobs()
    return [
        {
            'id': job.id,
            'name': job.name,
            'next_run_time': str(job.next_run_time) if job.next_run_time else None,
            'trigger': str(job.trigger),
        }
        for job in jobs
    ]
