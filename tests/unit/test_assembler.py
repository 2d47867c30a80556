"""Tests for the assembly pipeline — ordering, digest, atomicity, cleanup."""

from __future__ import annotations

import hashlib
import io
import logging
from pathlib import Path

import pytest

from chunkforge.core import assembler as assembler_module
from chunkforge.core.chunk_store import ChunkStore
from chunkforge.core.errors import (
    InvalidIdentityError,
    NotFoundError,
    StorageError,
)
from chunkforge.core.identity import encode
from chunkforge.core.metadata_store import MetadataStore
from chunkforge.core.upload_service import UploadService


class TestComplete:
    def test_greeting_scenario(self, service: UploadService, upload_chunks):
        identity = upload_chunks("greeting.txt", [b"hello ", b"world"])
        assert service.complete(identity) == identity

        artifact = service.storage.upload_dir / identity
        assert artifact.read_bytes() == b"hello world"

        record = service.metadata(identity)
        assert record.original_name == "greeting.txt"
        assert record.content_type == "application/octet-stream"
        assert record.file_hash == hashlib.sha256(b"hello world").hexdigest()
        assert record.size_bytes == 11
        assert record.chunk_count == 2

    def test_eleven_chunks_assemble_numerically(self, service: UploadService, upload_chunks):
        parts = [f"<{i}>".encode() for i in range(11)]
        identity = upload_chunks("eleven.bin", parts, order=[10, 2, 1, 0, 9, 3, 8, 4, 7, 5, 6])
        service.complete(identity)

        expected = b"".join(parts)
        assert (service.storage.upload_dir / identity).read_bytes() == expected
        assert b"<10><2>" not in expected

    def test_digest_matches_independent_rehash(self, service: UploadService, upload_chunks):
        parts = [bytes(range(256)) * 3, b"", b"\x00" * 1000, b"tail"]
        identity = upload_chunks("blob.mp4", parts)
        service.complete(identity)

        artifact_bytes = (service.storage.upload_dir / identity).read_bytes()
        record = service.metadata(identity)
        assert record.file_hash == hashlib.sha256(artifact_bytes).hexdigest()
        assert record.content_type == "video/mp4"

    def test_chunks_removed_after_success(self, service: UploadService, upload_chunks):
        identity = upload_chunks("a.png", [b"a", b"b"])
        service.complete(identity)
        assert not (service.storage.chunk_dir / identity).exists()

    def test_no_temp_files_left(self, service: UploadService, upload_chunks):
        identity = upload_chunks("a.png", [b"a", b"b"])
        service.complete(identity)
        names = sorted(p.name for p in service.storage.upload_dir.iterdir())
        assert names == sorted([identity, f"{identity}.json"])

    def test_gap_is_assembled_with_warning(
        self, service: UploadService, upload_chunks, caplog: pytest.LogCaptureFixture
    ):
        identity = encode("gappy.bin")
        for position, data in [(0, b"A"), (2, b"C")]:
            service.store_chunk(identity, str(position), io.BytesIO(data))
        with caplog.at_level(logging.WARNING, logger="chunkforge.core.assembler"):
            service.complete(identity)
        assert (service.storage.upload_dir / identity).read_bytes() == b"AC"
        assert "not contiguous" in caplog.text

    def test_long_name_completes(self, service: UploadService, upload_chunks):
        name = "a" * 170 + ".bin"
        identity = upload_chunks(name, [b"x", b"y"])
        assert len(identity) > 255 - len(".0123456789abcdef0123456789abcdef.part")

        assert service.complete(identity) == identity
        assert (service.storage.upload_dir / identity).read_bytes() == b"xy"
        assert service.metadata(identity).original_name == name


class TestCompleteFailures:
    def test_invalid_identity(self, service: UploadService):
        with pytest.raises(InvalidIdentityError):
            service.complete("not*valid")

    def test_missing_chunk_directory(self, service: UploadService):
        identity = encode("ghost.txt")
        with pytest.raises(NotFoundError):
            service.complete(identity)
        assert not (service.storage.upload_dir / identity).exists()
        assert not (service.storage.upload_dir / f"{identity}.json").exists()

    def test_empty_chunk_directory(self, service: UploadService):
        identity = encode("empty.txt")
        (service.storage.chunk_dir / identity).mkdir(parents=True)
        with pytest.raises(NotFoundError):
            service.complete(identity)
        assert not (service.storage.upload_dir / identity).exists()

    def test_write_failure_leaves_no_artifact_or_metadata(
        self, service: UploadService, upload_chunks, monkeypatch: pytest.MonkeyPatch
    ):
        identity = upload_chunks("fail.bin", [b"one", b"two"])

        def broken_copy(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(assembler_module, "copy_and_hash", broken_copy)
        with pytest.raises(StorageError) as excinfo:
            service.complete(identity)
        assert isinstance(excinfo.value.__cause__, OSError)

        upload_dir = service.storage.upload_dir
        assert list(upload_dir.iterdir()) == []
        # Chunks survive so the client can retry.
        assert (service.storage.chunk_dir / identity).is_dir()

    def test_failed_temp_cleanup_still_raises_storage_error(
        self, service: UploadService, upload_chunks, monkeypatch: pytest.MonkeyPatch
    ):
        identity = upload_chunks("stuck.bin", [b"one"])

        def broken_copy(*args, **kwargs):
            raise OSError("disk full")

        def broken_unlink(self, missing_ok=False):
            raise OSError(36, "File name too long")

        monkeypatch.setattr(assembler_module, "copy_and_hash", broken_copy)
        monkeypatch.setattr(Path, "unlink", broken_unlink)
        with pytest.raises(StorageError) as excinfo:
            service.complete(identity)
        assert str(excinfo.value.__cause__) == "disk full"

    def test_metadata_failure_hides_new_artifact(
        self, service: UploadService, upload_chunks, monkeypatch: pytest.MonkeyPatch
    ):
        identity = upload_chunks("v.bin", [b"version-1"])
        service.complete(identity)

        upload_chunks("v.bin", [b"version-2"])

        def broken_put(self, identity, record):
            raise StorageError("Failed to save metadata")

        monkeypatch.setattr(MetadataStore, "put", broken_put)
        with pytest.raises(StorageError):
            service.complete(identity)

        # The old sidecar no longer describes the artifact on disk.
        assert not service.metadata_store.exists(identity)
        with pytest.raises(NotFoundError):
            service.resolve(identity)

    def test_cleanup_failure_is_logged_not_raised(
        self,
        service: UploadService,
        upload_chunks,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ):
        identity = upload_chunks("keep.bin", [b"x", b"y"])

        def broken_remove(self, identity):
            raise StorageError("Failed to clean up chunks")

        monkeypatch.setattr(ChunkStore, "remove", broken_remove)
        with caplog.at_level(logging.WARNING, logger="chunkforge.core.assembler"):
            assert service.complete(identity) == identity

        assert "Failed to clean up chunks" in caplog.text
        assert service.metadata(identity).file_hash == hashlib.sha256(b"xy").hexdigest()
        assert (service.storage.chunk_dir / identity).is_dir()


class TestRepeatedCompletion:
    def test_second_call_keeps_stored_artifact(self, service: UploadService, upload_chunks):
        identity = upload_chunks("twice.txt", [b"only once"])
        service.complete(identity)
        first = service.metadata(identity)

        assert service.complete(identity) == identity
        assert (service.storage.upload_dir / identity).read_bytes() == b"only once"
        assert service.metadata(identity) == first

    def test_new_chunks_rebuild_artifact(self, service: UploadService, upload_chunks):
        identity = upload_chunks("again.txt", [b"old"])
        service.complete(identity)
        upload_chunks("again.txt", [b"new ", b"bytes"])
        service.complete(identity)

        assert (service.storage.upload_dir / identity).read_bytes() == b"new bytes"
        assert service.metadata(identity).file_hash == hashlib.sha256(b"new bytes").hexdigest()
