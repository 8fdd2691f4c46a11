"""
Queue one run of the expired-block sweep on RQ_QUEUE_NAME.

Run it from cron next to an `rq worker <RQ_QUEUE_NAME>` process, e.g. every 15 minutes:

    */15 * * * * cd /srv/portal && STORE_BACKEND=redis python -m scripts.enqueue_block_sweep

The worker needs STORE_BACKEND=redis: it builds its own registries and cannot
see another process's memory store.
"""
from portal.queue.jobs import release_expired_blocks_job
from portal.queue.rq_conn import get_queue
from portal.settings import settings


def main():
    job = get_queue().enqueue(release_expired_blocks_job)
    print(f"OK: queued {job.id} on {settings.RQ_QUEUE_NAME}")
    return job.id

if __name__ == "__main__":
    main()
