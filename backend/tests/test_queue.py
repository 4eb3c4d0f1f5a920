"""DJ queue tests: tail placement, atomic reorder, cancellation, version claims."""

import pytest

from clubops.core.exceptions import ConflictError, NotFoundError
from clubops.models.queue import DjQueue, QueueEntry, QueueEntryStatus, Stage
from clubops.services.queue_service import QueueService


def _add(client, headers, stage_id, dancer_id, **extra):
    return client.post(f"/api/queue/{stage_id}/add", json={"dancerId": dancer_id, **extra}, headers=headers)


class TestEnqueue:
    def test_first_entry_gets_position_one(self, client, auth_headers, test_stage, test_dancers):
        res = _add(client, auth_headers, test_stage.id, test_dancers[0].id, songTitle="Pony", artist="Ginuwine")
        assert res.status_code == 201
        data = res.json()
        assert data["position"] == 1
        assert data["songTitle"] == "Pony"
        assert data["status"] == "ACTIVE"
        assert data["dancer"]["stageName"] == "Aria"

    def test_positions_increase(self, client, auth_headers, test_stage, test_dancers):
        positions = [
            _add(client, auth_headers, test_stage.id, d.id).json()["position"]
            for d in test_dancers
        ]
        assert positions == [1, 2, 3]

    def test_position_follows_highest_after_reorder(self, client, auth_headers, test_stage, test_dancers):
        first = _add(client, auth_headers, test_stage.id, test_dancers[0].id).json()
        client.put(
            f"/api/queue/{test_stage.id}/reorder",
            json={"entries": [{"id": first["id"], "position": 7}]},
            headers=auth_headers,
        )
        res = _add(client, auth_headers, test_stage.id, test_dancers[1].id)
        assert res.json()["position"] == 8

    def test_unknown_stage_404(self, client, auth_headers, test_dancers):
        res = _add(client, auth_headers, 9999, test_dancers[0].id)
        assert res.status_code == 404
        assert res.json() == {"error": "Queue not found"}

    def test_dancer_from_other_club_404(self, client, db_session, auth_headers, test_stage, other_club):
        from clubops.models.dancer import Dancer
        outsider = Dancer(club_id=other_club.id, stage_name="Outsider")
        db_session.add(outsider)
        db_session.commit()

        res = _add(client, auth_headers, test_stage.id, outsider.id)
        assert res.status_code == 404
        assert db_session.query(QueueEntry).count() == 0

    def test_other_clubs_stage_404(self, client, db_session, auth_headers, other_club, test_dancers):
        stage = Stage(club_id=other_club.id, name="Their Stage")
        db_session.add(stage)
        db_session.flush()
        db_session.add(DjQueue(club_id=other_club.id, stage_id=stage.id, name="Their Queue"))
        db_session.commit()

        res = _add(client, auth_headers, stage.id, test_dancers[0].id)
        assert res.status_code == 404

    def test_enqueue_bumps_queue_version(self, db_session, test_club, test_queue, test_stage, test_dancers):
        before = test_queue.version
        QueueService(db_session, test_club.id).enqueue(test_stage.id, test_dancers[0].id)
        db_session.refresh(test_queue)
        assert test_queue.version == before + 1


class TestReadQueue:
    def test_entries_sorted_by_position(self, client, auth_headers, test_stage, test_dancers):
        ids = [_add(client, auth_headers, test_stage.id, d.id).json()["id"] for d in test_dancers]
        client.put(
            f"/api/queue/{test_stage.id}/reorder",
            json={"entries": [
                {"id": ids[0], "position": 3},
                {"id": ids[1], "position": 1},
                {"id": ids[2], "position": 2},
            ]},
            headers=auth_headers,
        )

        res = client.get(f"/api/queue/{test_stage.id}", headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["stage"]["name"] == "Main Stage"
        assert data["stageId"] == test_stage.id
        assert [e["id"] for e in data["entries"]] == [ids[1], ids[2], ids[0]]
        assert [e["position"] for e in data["entries"]] == [1, 2, 3]

    def test_empty_queue(self, client, auth_headers, test_stage):
        res = client.get(f"/api/queue/{test_stage.id}", headers=auth_headers)
        assert res.json()["entries"] == []

    def test_unknown_queue_404(self, client, auth_headers, test_club):
        res = client.get("/api/queue/9999", headers=auth_headers)
        assert res.status_code == 404


class TestReorder:
    def test_reorder_success(self, client, auth_headers, test_stage, test_dancers):
        ids = [_add(client, auth_headers, test_stage.id, d.id).json()["id"] for d in test_dancers[:2]]
        res = client.put(
            f"/api/queue/{test_stage.id}/reorder",
            json={"entries": [{"id": ids[0], "position": 2}, {"id": ids[1], "position": 1}]},
            headers=auth_headers,
        )
        assert res.status_code == 200
        assert res.json() == {"success": True}

    def test_unknown_entry_changes_nothing(self, client, db_session, auth_headers, test_stage, test_dancers):
        ids = [_add(client, auth_headers, test_stage.id, d.id).json()["id"] for d in test_dancers[:2]]
        res = client.put(
            f"/api/queue/{test_stage.id}/reorder",
            json={"entries": [{"id": ids[0], "position": 5}, {"id": 9999, "position": 6}]},
            headers=auth_headers,
        )
        assert res.status_code == 404

        db_session.expire_all()
        positions = [e.position for e in db_session.query(QueueEntry).order_by(QueueEntry.id)]
        assert positions == [1, 2]

    def test_entry_of_other_queue_rejected(self, client, db_session, auth_headers, test_club, test_stage, test_dancers):
        side = Stage(club_id=test_club.id, name="Side Stage")
        db_session.add(side)
        db_session.flush()
        db_session.add(DjQueue(club_id=test_club.id, stage_id=side.id, name="Side Stage Queue"))
        db_session.commit()

        side_entry = _add(client, auth_headers, side.id, test_dancers[0].id).json()
        res = client.put(
            f"/api/queue/{test_stage.id}/reorder",
            json={"entries": [{"id": side_entry["id"], "position": 4}]},
            headers=auth_headers,
        )
        assert res.status_code == 404

    def test_duplicate_positions_400(self, client, auth_headers, test_stage, test_dancers):
        ids = [_add(client, auth_headers, test_stage.id, d.id).json()["id"] for d in test_dancers[:2]]
        res = client.put(
            f"/api/queue/{test_stage.id}/reorder",
            json={"entries": [{"id": ids[0], "position": 1}, {"id": ids[1], "position": 1}]},
            headers=auth_headers,
        )
        assert res.status_code == 400

    def test_lost_race_conflicts_and_changes_nothing(self, db_session, test_club, test_stage, test_dancers):
        service = QueueService(db_session, test_club.id)
        entry = service.enqueue(test_stage.id, test_dancers[0].id)
        queue = service.get_queue(test_stage.id)

        # A concurrent writer claims the queue; this session still holds the old version
        db_session.query(DjQueue).filter(DjQueue.id == queue.id).update(
            {DjQueue.version: DjQueue.version + 1}, synchronize_session=False,
        )

        with pytest.raises(ConflictError):
            service.reorder(test_stage.id, [(entry.id, 5)])

        db_session.refresh(entry)
        assert entry.position == 1

    def test_write_failure_mid_batch_rolls_back_every_position(
        self, db_session, test_club, test_stage, test_dancers, monkeypatch,
    ):
        service = QueueService(db_session, test_club.id)
        entries = [service.enqueue(test_stage.id, d.id) for d in test_dancers]
        version_before = service.get_queue(test_stage.id).version
        real_flush = db_session.flush

        def flush_then_fail(*args, **kwargs):
            # The UPDATEs for the whole batch reach the database before the failure
            real_flush(*args, **kwargs)
            raise RuntimeError("disk full")

        monkeypatch.setattr(db_session, "commit", flush_then_fail)
        with pytest.raises(RuntimeError):
            service.reorder(test_stage.id, [(entries[0].id, 3), (entries[2].id, 1)])
        monkeypatch.undo()

        db_session.expire_all()
        positions = [
            e.position
            for e in db_session.query(QueueEntry).order_by(QueueEntry.id).all()
        ]
        assert positions == [1, 2, 3]
        assert service.get_queue(test_stage.id).version == version_before


class TestCancel:
    def test_cancelled_entry_hidden_and_position_not_reused(self, client, auth_headers, test_stage, test_dancers):
        first = _add(client, auth_headers, test_stage.id, test_dancers[0].id).json()
        second = _add(client, auth_headers, test_stage.id, test_dancers[1].id).json()

        res = client.delete(f"/api/queue/{test_stage.id}/entries/{second['id']}", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["status"] == "CANCELLED"

        entries = client.get(f"/api/queue/{test_stage.id}", headers=auth_headers).json()["entries"]
        assert [e["id"] for e in entries] == [first["id"]]

        third = _add(client, auth_headers, test_stage.id, test_dancers[2].id).json()
        assert third["position"] == 3

    def test_cancel_unknown_entry_404(self, client, auth_headers, test_stage):
        res = client.delete(f"/api/queue/{test_stage.id}/entries/9999", headers=auth_headers)
        assert res.status_code == 404

    def test_cancel_twice_is_idempotent(self, db_session, test_club, test_stage, test_dancers):
        service = QueueService(db_session, test_club.id)
        entry = service.enqueue(test_stage.id, test_dancers[0].id)
        service.cancel(test_stage.id, entry.id)
        again = service.cancel(test_stage.id, entry.id)
        assert again.status == QueueEntryStatus.CANCELLED

    def test_service_get_queue_unknown_raises(self, db_session, test_club):
        with pytest.raises(NotFoundError):
            QueueService(db_session, test_club.id).get_queue(42)
