"""
Contest CRUD service tests - judge email uniqueness under concurrent writes
"""
import pytest

from quilo_backend.exceptions import ConflictError
from quilo_backend.services import contest_service


async def _email_always_free(db, email, exclude_id=None):
    return None


class TestJudgeEmailConflicts:

    async def test_update_losing_race_for_email_raises_conflict(self, db_session, seed_data, monkeypatch):
        # Another request took the email after the lookup passed
        monkeypatch.setattr(contest_service, "_ensure_email_free", _email_always_free)
        ana = seed_data["ana"]
        ana_id = ana.id

        with pytest.raises(ConflictError) as exc_info:
            await contest_service.update_judge(db_session, ana_id, {"email": "bruno@oquiloenosso.com"})

        assert exc_info.value.http_status == 409
        assert exc_info.value.details == {"email": "bruno@oquiloenosso.com"}

        await db_session.refresh(ana)
        assert ana.email == "ana@oquiloenosso.com"

    async def test_create_losing_race_for_email_raises_conflict(self, db_session, seed_data, monkeypatch):
        monkeypatch.setattr(contest_service, "_ensure_email_free", _email_always_free)

        with pytest.raises(ConflictError):
            await contest_service.create_judge(db_session, {"name": "Ana Duplicada", "email": "ana@oquiloenosso.com"})

        judges = await contest_service.list_judges(db_session)
        assert [j.email for j in judges] == ["ana@oquiloenosso.com", "bruno@oquiloenosso.com"]

    async def test_update_keeps_own_email(self, db_session, seed_data):
        result = await contest_service.update_judge(
            db_session, seed_data["bruno"].id, {"email": "BRUNO@oquiloenosso.com", "specialty": "Carnes"}
        )
        await db_session.commit()

        assert result.record.email == "bruno@oquiloenosso.com"
        assert result.record.specialty == "Carnes"
