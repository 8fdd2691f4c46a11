from unittest.mock import MagicMock, patch

import pytest

from portal.queue.jobs import release_expired_blocks_job, send_decision_callback_job
from portal.store.models import User
from scripts import enqueue_block_sweep

PAYLOAD = {"applicationId": "a1", "status": "APPROVED"}


@patch("portal.queue.jobs.log")
@patch("portal.queue.jobs.send_decision_http", return_value=(True, 204, None))
def test_send_decision_callback_job(mock_send, mock_log):
    assert send_decision_callback_job(PAYLOAD) == 204
    mock_send.assert_called_with(PAYLOAD)
    mock_log.assert_called_once()
    assert mock_log.call_args.kwargs["event"] == "decision_callback_job_start"


@patch("portal.queue.jobs.log")
@patch("portal.queue.jobs.send_decision_http", return_value=(False, 502, "HTTP 502"))
def test_send_decision_callback_job_raises_for_retry(mock_send, mock_log):
    with pytest.raises(RuntimeError, match="502"):
        send_decision_callback_job(PAYLOAD)


@patch("portal.queue.jobs.log")
@patch("portal.queue.jobs.build_registries")
def test_release_expired_blocks_job(mock_build, mock_log):
    registries = MagicMock()
    registries.users.release_expired_blocks.return_value = [User(id="u1", email="a@example.com"), User(id="u4", email="b@example.com")]
    mock_build.return_value = registries

    assert release_expired_blocks_job() == ["u1", "u4"]
    assert mock_log.call_args.kwargs["released"] == 2


@patch("scripts.enqueue_block_sweep.get_queue")
def test_block_sweep_script_enqueues_job(mock_get_queue, capsys):
    mock_get_queue.return_value.enqueue.return_value.id = "job-1"

    assert enqueue_block_sweep.main() == "job-1"
    mock_get_queue.return_value.enqueue.assert_called_once_with(release_expired_blocks_job)
    assert "OK: queued job-1" in capsys.readouterr().out
