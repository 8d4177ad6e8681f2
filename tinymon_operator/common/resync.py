import threading
from typing import Callable, Dict, List, Optional

import kr8s
from injector import inject, singleton
from loguru import logger

from tinymon_operator.common.annotations import is_enabled
from tinymon_operator.common.synchronizer import annotations_of
from tinymon_operator.settings import Settings


def enabled_objects(kind: str, namespaced: bool = True) -> List[dict]:
    """Raw bodies of every object of a kind that carries tinymon.io/enabled=true.

    Annotations cannot be selected server-side, so the kind is listed in full.
    """
    if namespaced:
        objects = kr8s.get(kind, namespace=kr8s.ALL)
    else:
        objects = kr8s.get(kind)
    return [obj.raw for obj in objects if is_enabled(annotations_of(obj.raw))]


@singleton
class ResyncLoop:
    """
    Periodically re-runs the Present-state sync of every enabled resource.

    Plugins register one job per kind. The loop runs in a daemon thread started
    from the kopf startup handler and stopped from the cleanup handler, so no
    per-object timer (and no finalizer) is needed.
    """

    @inject
    def __init__(self, settings: Settings):
        self.interval = settings.sync_interval
        self._jobs: Dict[str, Callable[[], None]] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def register(self, name: str, job: Callable[[], None]) -> None:
        logger.debug(f"Registered resync job: {name}")
        self._jobs[name] = job

    def run_once(self) -> None:
        for name, job in list(self._jobs.items()):
            try:
                job()
            except Exception as e:
                # One kind failing to list must not stop the others
                logger.error(f"Resync of {name} failed, will retry in {self.interval}s: {e}")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.run_once()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="tinymon-resync", daemon=True)
        self._thread.start()
        logger.info(f"Resync loop started for {', '.join(self._jobs) or 'no kinds'} every {self.interval}s")

    def stop(self, timeout: float = 10.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Resync loop stopped")
