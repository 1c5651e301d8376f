"""
Tourlist Backend - Cloudinary Media Service Unit Tests (Mocked)
================================================================

What:  Tests for CloudinaryMediaService with the Cloudinary SDK patched.
How:   Patches cloudinary.uploader / cloudinary.api so no network call is made.

What we test:
    ✅ Circuit breaker state machine
    ✅ Upload sends a data URI with the fixed folder and transformation
    ✅ SDK failure → retried → UpstreamError, breaker opens at threshold
    ✅ Open breaker rejects without calling the SDK
    ✅ Half-open breaker lets a single test upload through
    ✅ delete_image / health_check never raise
    ❌ Real Cloudinary calls
"""

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.config import Settings
from app.exceptions import UpstreamError
from app.services.media_service import CircuitBreaker, CloudinaryMediaService

UPLOAD_RESULT = {
    "secure_url": "https://res.cloudinary.com/demo/image/upload/travel-app/kakum.jpg",
    "public_id": "travel-app/kakum",
    "width": 800,
    "height": 600,
}


class TestCircuitBreaker:

    def test_initial_state_is_closed(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        assert cb.state == "closed"
        assert cb.failure_count == 0

    def test_stays_closed_under_threshold(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        for _ in range(4):
            cb.record_failure()
        assert cb.state == "closed"
        assert cb.can_execute()

    def test_opens_at_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=60)
        for _ in range(3):
            cb.record_failure()
        assert cb.state == "open"

    def test_open_circuit_rejects_calls(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
        cb.record_failure()

        with pytest.raises(UpstreamError) as exc_info:
            cb.can_execute()
        assert 0 < exc_info.value.retry_after <= 60

    def test_success_resets_failure_count(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        cb.record_failure()
        cb.record_failure()

        cb.record_success()

        assert cb.failure_count == 0
        assert cb.state == "closed"

    def test_half_open_after_recovery_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        time.sleep(0.01)

        assert cb.can_execute()
        assert cb.state == "half_open"

    def test_half_open_failure_reopens(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        cb.can_execute()

        cb.record_failure()

        assert cb.state == "open"

    def test_half_open_admits_one_caller_at_a_time(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()

        assert cb.can_execute()
        with pytest.raises(UpstreamError) as exc_info:
            cb.can_execute()
        assert exc_info.value.context["circuit"] == "half_open"

        cb.record_success()
        assert cb.state == "closed"
        assert cb.can_execute()
        assert cb.can_execute()

    def test_released_trial_lets_next_caller_test(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        cb.can_execute()

        cb.release_trial()

        assert cb.state == "half_open"
        assert cb.can_execute()


class TestCloudinaryMediaService:

    def setup_method(self):
        self.settings = Settings(
            cloudinary_cloud_name="demo",
            cloudinary_api_key="key",
            cloudinary_api_secret="secret",
            retry_max_attempts=2,
            cb_failure_threshold=2,
            cb_recovery_timeout=60,
        )
        self.service = CloudinaryMediaService(self.settings)

    def test_data_uri(self):
        assert CloudinaryMediaService.to_data_uri(b"abc", "image/png") == "data:image/png;base64,YWJj"

    @pytest.mark.asyncio
    async def test_upload_success(self, sample_image_bytes):
        with patch("cloudinary.uploader.upload", MagicMock(return_value=UPLOAD_RESULT)) as upload:
            descriptor = await self.service.upload_image(sample_image_bytes, "image/jpeg", "kakum.jpg")

        assert descriptor.url == UPLOAD_RESULT["secure_url"]
        assert descriptor.public_id == "travel-app/kakum"
        assert (descriptor.width, descriptor.height) == (800, 600)

        args, kwargs = upload.call_args
        assert args[0].startswith("data:image/jpeg;base64,")
        assert kwargs["folder"] == "travel-app"
        assert kwargs["transformation"] == [
            {"width": 800, "height": 600, "crop": "fill"},
            {"quality": "auto"},
        ]

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, sample_image_bytes):
        upload = MagicMock(side_effect=[ConnectionError("reset"), UPLOAD_RESULT])

        with patch("cloudinary.uploader.upload", upload), \
                patch("asyncio.sleep", new_callable=AsyncMock):
            descriptor = await self.service.upload_image(sample_image_bytes, "image/jpeg")

        assert upload.call_count == 2
        assert descriptor.public_id == "travel-app/kakum"
        assert self.service.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_upstream_error(self, sample_image_bytes):
        upload = MagicMock(side_effect=ConnectionError("down"))

        with patch("cloudinary.uploader.upload", upload), \
                patch("asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(UpstreamError) as exc_info:
                await self.service.upload_image(sample_image_bytes, "image/jpeg")

        assert upload.call_count == 2
        assert exc_info.value.message == "Failed to upload images"
        assert self.service.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_open_circuit_skips_sdk(self, sample_image_bytes):
        for _ in range(2):
            self.service.circuit_breaker.record_failure()
        assert self.service.circuit_open

        upload = MagicMock(return_value=UPLOAD_RESULT)
        with patch("cloudinary.uploader.upload", upload):
            with pytest.raises(UpstreamError):
                await self.service.upload_image(sample_image_bytes, "image/jpeg")

        upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_half_open_sends_single_test_upload(self, sample_image_bytes):
        breaker = self.service.circuit_breaker
        breaker.state = CircuitBreaker.OPEN
        breaker.failure_count = 2
        breaker.last_failure_time = time.time() - 120
        upload = MagicMock(side_effect=ConnectionError("still down"))

        with patch("cloudinary.uploader.upload", upload), \
                patch("asyncio.sleep", new_callable=AsyncMock):
            results = await asyncio.gather(
                *(self.service.upload_image(sample_image_bytes, "image/jpeg") for _ in range(5)),
                return_exceptions=True,
            )

        assert all(isinstance(r, UpstreamError) for r in results)
        # One caller got through and used its retry attempts; the rest were rejected
        assert upload.call_count == self.settings.retry_max_attempts
        assert breaker.state == CircuitBreaker.OPEN
        assert not breaker.trial_in_flight

    @pytest.mark.asyncio
    async def test_delete_image(self):
        with patch("cloudinary.uploader.destroy", MagicMock(return_value={"result": "ok"})):
            assert await self.service.delete_image("travel-app/kakum") is True

        with patch("cloudinary.uploader.destroy", MagicMock(return_value={"result": "not found"})):
            assert await self.service.delete_image("travel-app/kakum") is False

    @pytest.mark.asyncio
    async def test_delete_image_swallows_sdk_errors(self):
        with patch("cloudinary.uploader.destroy", MagicMock(side_effect=RuntimeError("boom"))):
            assert await self.service.delete_image("travel-app/kakum") is False

    @pytest.mark.asyncio
    async def test_health_check(self):
        with patch("cloudinary.api.ping", MagicMock(return_value={"status": "ok"})):
            assert await self.service.health_check() is True

        with patch("cloudinary.api.ping", MagicMock(side_effect=RuntimeError("unreachable"))):
            assert await self.service.health_check() is False
