import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_all(tasks: Iterable[Callable[[], T]], max_workers: Optional[int] = None) -> List[T]:
    """
    Runs every task concurrently and joins on all of them.

    Fail-fast: the first task that raises cancels whatever has not started
    yet and its exception is re-raised unchanged. Tasks already running are
    allowed to finish; their output is not rolled back.

    Returns results in task order.
    """
    tasks = list(tasks)
    if not tasks:
        return []

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="iconcraft") as executor:
        futures = [executor.submit(task) for task in tasks]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        failed = next((f for f in futures if f in done and f.exception() is not None), None)
        if failed is not None:
            for f in pending:
                f.cancel()
            logger.debug(f"Aborting fan-out: {len(pending)} pending task(s) cancelled")
            raise failed.exception()

        return [f.result() for f in futures]
