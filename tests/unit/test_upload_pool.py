"""Tests for the upload worker pool."""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from b2upload import (
    ExistenceCheckError,
    PathGenerationError,
    TaskState,
    TransferAPIError,
    UploadURLError,
)
from b2upload.core.upload import (
    PublicURLBuilder,
    RemotePathBuilder,
    UploadTask,
    UploadWorkerPool,
    worker_count,
)


@pytest.mark.parametrize("tasks, expected", [
    (0, 0),
    (1, 1),
    (3, 3),
    (5, 5),
    (6, 5),
    (100, 5),
])
def test_worker_count(tasks, expected):
    """Test worker count is min(5, N)."""
    assert worker_count(tasks) == expected


class TestUploadWorkerPool:
    """Test suite for UploadWorkerPool."""
    
    @pytest.fixture
    def checker(self):
        checker = Mock()
        checker.exists = AsyncMock(return_value=(None, False))
        return checker
    
    @pytest.fixture
    def transfer(self):
        transfer = Mock()
        transfer.upload = AsyncMock(return_value={'fileName': 'x'})
        return transfer
    
    @pytest.fixture
    def pool(self, config, session, fixed_day, checker, transfer):
        return UploadWorkerPool(
            config=config,
            session=session,
            path_builder=RemotePathBuilder(today=lambda: fixed_day),
            existence_checker=checker,
            transfer=transfer,
            url_builder=PublicURLBuilder(config)
        )
    
    @pytest.mark.asyncio
    async def test_one_result_per_task(self, pool, sample_files, credential):
        """Test N inputs give N results with the same set of paths."""
        results = await pool.upload_all(sample_files, credential)
        
        assert len(results) == len(sample_files)
        assert {r.local_path for r in results} == set(sample_files)
        assert all(r.ok for r in results)
        assert all(r.state is TaskState.SUCCEEDED for r in results)
        assert all(r.state.is_terminal for r in results)
        assert not TaskState.QUEUED.is_terminal
        assert pool.last_worker_count == 5
    
    @pytest.mark.asyncio
    async def test_small_batch_worker_count(self, pool, sample_files, credential):
        """Test fewer tasks than pool size spawn one worker per task."""
        results = await pool.upload_all(sample_files[:2], credential)
        
        assert len(results) == 2
        assert pool.last_worker_count == 2
    
    @pytest.mark.asyncio
    async def test_empty_batch(self, pool, credential, transfer):
        """Test no tasks spawn no workers."""
        results = await pool.upload_all([], credential)
        
        assert results == []
        assert pool.last_worker_count == 0
        transfer.upload.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_accepts_tasks_and_strings(self, pool, sample_files, credential):
        """Test inputs may be UploadTask, Path or str."""
        inputs = [UploadTask.from_path(sample_files[0]), str(sample_files[1]), sample_files[2]]
        
        results = await pool.upload_all(inputs, credential)
        
        assert {r.local_path for r in results} == set(sample_files[:3])
    
    @pytest.mark.asyncio
    async def test_existing_file_skipped(self, pool, sample_files, credential, checker, transfer):
        """Test existing keys are skipped without transfer."""
        checker.exists = AsyncMock(return_value=("https://cdn/x.png", True))
        
        results = await pool.upload_all(sample_files[:1], credential)
        
        assert results[0].skipped is True
        assert results[0].state is TaskState.SKIPPED
        assert results[0].public_url == "https://cdn/x.png"
        transfer.upload.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_new_upload_not_skipped(self, pool, sample_files, credential, checker):
        """Test a fresh upload is not marked skipped and exists() is called once."""
        results = await pool.upload_all(sample_files[:1], credential)
        
        assert results[0].skipped is False
        assert results[0].public_url.startswith("https://f000.example.com/file/mybucket/alice/2024/0101/")
        assert checker.exists.await_count == 1
    
    @pytest.mark.asyncio
    async def test_existence_check_failure_still_uploads(self, pool, sample_files, credential, checker, transfer):
        """Test a failed existence check does not block the upload."""
        checker.exists = AsyncMock(side_effect=ExistenceCheckError("listing failed"))
        
        results = await pool.upload_all(sample_files[:2], credential)
        
        assert all(r.ok for r in results)
        assert transfer.upload.await_count == 2
    
    @pytest.mark.asyncio
    async def test_transfer_error_isolated(self, pool, sample_files, credential, transfer):
        """Test one failing transfer does not affect the others."""
        failing = sample_files[1]
        
        async def upload(path, remote_key, cred, md5_hex=None):
            if path == failing:
                raise TransferAPIError("rejected", status=400, body="bad")
            return {'fileName': remote_key}
        
        transfer.upload = AsyncMock(side_effect=upload)
        
        results = await pool.upload_all(sample_files, credential)
        
        by_path = {r.local_path: r for r in results}
        assert len(results) == len(sample_files)
        assert isinstance(by_path[failing].error, TransferAPIError)
        assert by_path[failing].state is TaskState.FAILED
        assert by_path[failing].public_url == ''
        assert sum(1 for r in results if r.ok) == len(sample_files) - 1
    
    @pytest.mark.asyncio
    async def test_missing_file_is_path_error(self, pool, sample_files, credential, tmp_path):
        """Test an unreadable file fails alone with PathGenerationError."""
        missing = tmp_path / "missing.png"
        
        results = await pool.upload_all([missing, sample_files[0]], credential)
        
        by_path = {r.local_path: r for r in results}
        assert isinstance(by_path[missing].error, PathGenerationError)
        assert by_path[sample_files[0]].ok
    
    @pytest.mark.asyncio
    async def test_unexpected_error_captured(self, pool, sample_files, credential, transfer):
        """Test unexpected exceptions still produce a result."""
        transfer.upload = AsyncMock(side_effect=RuntimeError("boom"))
        
        results = await pool.upload_all(sample_files[:3], credential)
        
        assert len(results) == 3
        assert all(isinstance(r.error, RuntimeError) for r in results)
    
    @pytest.mark.asyncio
    async def test_credential_error_fails_every_task(self, pool, sample_files, checker, transfer):
        """Test a missing upload URL becomes a per-file error."""
        error = UploadURLError("service unavailable")
        
        results = await pool.upload_all(sample_files, None, credential_error=error)
        
        assert len(results) == len(sample_files)
        assert all(isinstance(r.error, UploadURLError) for r in results)
        assert all(r.error.__cause__ is error for r in results)
        checker.exists.assert_not_called()
        transfer.upload.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, pool, sample_files, credential, transfer):
        """Test no more than five transfers run at once."""
        active = 0
        peak = 0
        
        async def upload(path, remote_key, cred, md5_hex=None):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return {'fileName': remote_key}
        
        transfer.upload = AsyncMock(side_effect=upload)
        
        await pool.upload_all(sample_files, credential)
        
        assert 1 < peak <= 5
    
    @pytest.mark.asyncio
    async def test_shared_credential_passed_to_all(self, pool, sample_files, credential, transfer):
        """Test every transfer uses the same credential object."""
        await pool.upload_all(sample_files, credential)
        
        assert all(call.args[2] is credential for call in transfer.upload.await_args_list)
