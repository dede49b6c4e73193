"""APScheduler wrapper for periodic adapter jobs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger


class AdapterScheduler:
	"""Minimal wrapper around AsyncIOScheduler for adapter jobs."""

	def __init__(self) -> None:
		self._scheduler = AsyncIOScheduler(timezone="UTC")
		self._started = False

	@property
	def running(self) -> bool:
		return self._started

	def start(self) -> None:
		if not self._started:
			self._scheduler.start()
			self._started = True

	def shutdown(self) -> None:
		if self._started:
			self._scheduler.shutdown(wait=False)
			self._started = False

	def schedule_interval(
		self,
		job_id: str,
		func: Callable[[], object],
		*,
		seconds: float,
		run_now: bool = False,
	) -> None:
		trigger = IntervalTrigger(seconds=seconds)
		options: dict[str, object] = {}
		if run_now:
			options["next_run_time"] = datetime.now(timezone.utc)
		self._scheduler.add_job(
			func,
			trigger=trigger,
			id=job_id,
			replace_existing=True,
			max_instances=1,
			coalesce=True,
			**options,
		)


__all__ = ["AdapterScheduler"]
