import pytest
from sqlmodel import Session

from streetcode.db.models.audios import Audio
from streetcode.db.repositories.audios import AudioRepository
from streetcode.db.repositories.base import AFFECTED_ROWS_KEY
from streetcode.db.repositories.streetcodes import StreetcodeRepository


def _audio_fields(blob_name="abc.mp3", title="Anthem"):
    return {"title": title, "mime_type": "audio/mpeg", "blob_name": blob_name}


def test_save_changes_counts_inserted_rows(session):
    repo = AudioRepository(session)
    audio = repo.create(commit=False, **_audio_fields())
    assert audio.id is not None
    assert repo.save_changes() == 1
    assert repo.get(audio.id).blob_name == "abc.mp3"


def test_save_changes_without_pending_work_returns_zero(session):
    repo = AudioRepository(session)
    assert repo.save_changes() == 0
    repo.create(**_audio_fields())  # commit immédiat
    assert repo.save_changes() == 0


def test_save_changes_counts_deleted_rows(session):
    repo = AudioRepository(session)
    audio = repo.create(**_audio_fields())
    repo.delete(audio, commit=False)
    assert repo.save_changes() == 1
    assert repo.get(audio.id) is None


def test_rows_can_share_a_blob_name(session):
    repo = AudioRepository(session)
    repo.create(**_audio_fields(title="first"))
    repo.create(**_audio_fields(title="second"))
    assert [a.title for a in repo.list_all()] == ["first", "second"]
    assert repo.count() == 2


def test_list_all_is_empty_not_none(session):
    assert list(AudioRepository(session).list_all()) == []


def test_streetcode_get_by_id_with_audio(session):
    audio = AudioRepository(session).create(**_audio_fields())
    streetcodes = StreetcodeRepository(session)
    with_audio = streetcodes.create(title="Khreshchatyk", audio_id=audio.id)
    without_audio = streetcodes.create(title="Podil")
    with_audio_id, without_audio_id = with_audio.id, without_audio.id
    session.expunge_all()

    loaded = streetcodes.get_by_id(with_audio_id, include_audio=True)
    assert isinstance(loaded.audio, Audio)
    assert loaded.audio.blob_name == "abc.mp3"

    assert streetcodes.get_by_id(without_audio_id, include_audio=True).audio is None
    assert streetcodes.get_by_id(999) is None


def test_count_by_blob_name(session):
    repo = AudioRepository(session)
    first = repo.create(**_audio_fields(title="first"))
    repo.create(**_audio_fields(title="second"))
    repo.create(**_audio_fields(blob_name="other.mp3"))
    assert repo.count_by_blob_name("abc.mp3") == 2
    assert repo.count_by_blob_name("missing.mp3") == 0

    repo.delete(first, commit=False)
    assert repo.count_by_blob_name("abc.mp3") == 1


def test_unlink_audio_clears_every_reference(session):
    audio = AudioRepository(session).create(**_audio_fields())
    streetcodes = StreetcodeRepository(session)
    first = streetcodes.create(title="Podil", audio_id=audio.id)
    second = streetcodes.create(title="Obolon", audio_id=audio.id)
    bare = streetcodes.create(title="Lavra")

    assert streetcodes.unlink_audio(audio.id, commit=False) == 2
    assert streetcodes.save_changes() == 2

    for streetcode_id in (first.id, second.id, bare.id):
        assert streetcodes.get_by_id(streetcode_id, include_audio=True).audio is None
    assert streetcodes.unlink_audio(audio.id) == 0


def test_audio_ids_are_not_reused_after_delete(session):
    repo = AudioRepository(session)
    first = repo.create(**_audio_fields())
    first_id = first.id
    repo.delete(first)
    assert repo.create(**_audio_fields()).id != first_id


def test_plain_session_is_not_tracked(engine):
    with Session(engine) as plain:
        AudioRepository(plain).create(commit=False, **_audio_fields())
        plain.flush()
        assert AFFECTED_ROWS_KEY not in plain.info
        with pytest.raises(TypeError):
            AudioRepository(plain).save_changes()
        plain.rollback()
