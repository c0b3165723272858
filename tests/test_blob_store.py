import base64
import hashlib
import io
import os
from concurrent.futures import ThreadPoolExecutor

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import ANY, Stubber

from streetcode.features.blobs.storage import BlobNotFoundError, LocalBlobStore, S3BlobStore, make_blob_store

RAW = b"ID3\x03\x00fake-mp3-frames"
ENCODED = base64.b64encode(RAW).decode("ascii")
EXPECTED_NAME = hashlib.sha256(RAW).hexdigest() + ".mp3"


def _stored_files(root):
    return [name for _dir, _subdirs, files in os.walk(root) for name in files]


# -----------------------------
# LocalBlobStore
# -----------------------------
def test_local_save_names_blob_after_content_hash(blob_store):
    assert blob_store.save(ENCODED, "Anthem", "mp3") == EXPECTED_NAME
    # l'extension peut arriver avec son point
    assert blob_store.save(ENCODED, "Anthem", ".mp3") == EXPECTED_NAME


def test_local_save_same_content_twice_is_deduplicated(blob_store):
    first = blob_store.save(ENCODED, "first title", "mp3")
    second = blob_store.save(ENCODED, "another title", "mp3")
    assert first == second
    assert _stored_files(blob_store.root) == [EXPECTED_NAME]


def test_local_concurrent_saves_of_same_content(blob_store):
    with ThreadPoolExecutor(max_workers=8) as pool:
        names = list(pool.map(lambda i: blob_store.save(ENCODED, f"t{i}", "mp3"), range(16)))
    assert set(names) == {EXPECTED_NAME}
    assert _stored_files(blob_store.root) == [EXPECTED_NAME]
    with blob_store.read_stream(EXPECTED_NAME) as stream:
        assert stream.read() == RAW


def test_local_reads_encoded_and_raw(blob_store):
    name = blob_store.save(ENCODED, "Anthem", "mp3")
    assert blob_store.read_encoded(name) == ENCODED
    stream = blob_store.read_stream(name)
    try:
        assert stream.read() == RAW
    finally:
        stream.close()


def test_local_read_missing_blob_raises(blob_store):
    with pytest.raises(BlobNotFoundError):
        blob_store.read_stream("missing.mp3")
    with pytest.raises(LookupError):
        blob_store.read_encoded("missing.mp3")


def test_local_delete_is_idempotent(blob_store):
    name = blob_store.save(ENCODED, "Anthem", "mp3")
    blob_store.delete(name)
    blob_store.delete(name)
    assert _stored_files(blob_store.root) == []


def test_local_save_rejects_invalid_base64(blob_store):
    with pytest.raises(ValueError):
        blob_store.save("not base64 !!", "Anthem", "mp3")


def test_local_save_rejects_extension_with_path_segments(tmp_path):
    store = LocalBlobStore(root=str(tmp_path / "blobs"))
    for extension in ("x/../../../../escaped", "../mp3", "mp3\\..", "mp3\n", ""):
        with pytest.raises(ValueError):
            store.save(ENCODED, "Anthem", extension)
    assert not (tmp_path / "escaped").exists()
    assert _stored_files(tmp_path) == []


def test_local_rejects_blob_names_leaving_root(blob_store):
    for blob_name in ("../x", "ab/../../x", "..", ""):
        with pytest.raises(ValueError):
            blob_store.read_stream(blob_name)
        with pytest.raises(ValueError):
            blob_store.delete(blob_name)


def test_make_blob_store_unknown_backend():
    with pytest.raises(ValueError):
        make_blob_store("ftp")


# -----------------------------
# S3BlobStore (botocore Stubber)
# -----------------------------
@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


def _key_params(name=EXPECTED_NAME):
    return {"Bucket": "media", "Key": f"audios/{name}"}


def test_s3_save_uploads_only_when_missing(s3_client):
    store = S3BlobStore(client=s3_client, bucket="media", prefix="audios/")
    with Stubber(s3_client) as stubber:
        stubber.add_client_error(
            "head_object", service_error_code="404", http_status_code=404, expected_params=_key_params()
        )
        stubber.add_response(
            "put_object",
            {},
            {
                **_key_params(),
                "Body": ANY,
                "ContentType": "audio/mpeg",
                "Metadata": {"title": "City%20anthem"},
            },
        )
        stubber.add_response("head_object", {}, _key_params())

        assert store.save(ENCODED, "City anthem", "mp3") == EXPECTED_NAME
        assert store.save(ENCODED, "City anthem", "mp3") == EXPECTED_NAME
        stubber.assert_no_pending_responses()


def test_s3_reads_encoded_and_raw(s3_client):
    store = S3BlobStore(client=s3_client, bucket="media", prefix="audios/")
    with Stubber(s3_client) as stubber:
        for _ in range(2):
            stubber.add_response(
                "get_object",
                {"Body": StreamingBody(io.BytesIO(RAW), len(RAW))},
                _key_params(),
            )

        assert store.read_encoded(EXPECTED_NAME) == ENCODED
        body = store.read_stream(EXPECTED_NAME)
        try:
            assert body.read() == RAW
        finally:
            body.close()


def test_s3_read_missing_blob_raises(s3_client):
    store = S3BlobStore(client=s3_client, bucket="media", prefix="audios/")
    with Stubber(s3_client) as stubber:
        stubber.add_client_error(
            "get_object", service_error_code="NoSuchKey", http_status_code=404, expected_params=_key_params()
        )
        with pytest.raises(BlobNotFoundError):
            store.read_stream(EXPECTED_NAME)


def test_s3_delete(s3_client):
    store = S3BlobStore(client=s3_client, bucket="media", prefix="audios/")
    with Stubber(s3_client) as stubber:
        stubber.add_response("delete_object", {}, _key_params())
        store.delete(EXPECTED_NAME)
        stubber.assert_no_pending_responses()
