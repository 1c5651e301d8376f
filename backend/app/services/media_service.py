"""
Tourlist Backend - Cloudinary Media Service Implementation
===========================================================

What:  Concrete media service storing listing images on Cloudinary.
How:   Sends each image as a base64 data URI with a fixed resize/quality
       transformation, with retry logic and a circuit breaker around the
       SDK call.
Who:   Built once by create_app(); called by UploadService for each image.

Resilience Strategy:
    1. Tenacity retry with exponential backoff + jitter for transient failures
    2. Circuit breaker so a Cloudinary outage fails uploads instantly
    3. The blocking SDK call runs in a worker thread (asyncio.to_thread)

Stored image:
    folder          settings.media_folder (default "travel-app")
    transformation  [{width: 800, height: 600, crop: "fill"}, {quality: "auto"}]
"""

import asyncio
import base64
import logging
import time
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.config import Settings
from app.exceptions import UpstreamError
from app.middleware.request_id import current_request_id
from app.schemas.upload import ImageDescriptor
from app.services.media_base import MediaService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker Implementation
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    Circuit breaker guarding calls to the media host.

    State Machine:
        CLOSED (normal operation)
            → On failure: increment failure_count
            → When failure_count >= threshold: transition to OPEN

        OPEN (rejecting all requests)
            → All calls raise UpstreamError immediately
            → After recovery_timeout seconds: transition to HALF_OPEN

        HALF_OPEN (testing recovery)
            → Allow ONE request through
            → Concurrent callers are rejected while that request runs
            → On success: transition to CLOSED (reset failure_count)
            → On failure: transition back to OPEN (reset timer)

    Thread Safety:
        Not thread-safe (plain counters). uvicorn async workers share a
        single process, so state is per worker.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        """
        Args:
            failure_threshold: Consecutive failures before opening circuit
            recovery_timeout: Seconds to wait before testing recovery
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None
        # Set while the single HALF_OPEN test call is outstanding
        self.trial_in_flight = False

    def can_execute(self) -> bool:
        """
        Check if a request is allowed through the circuit breaker.

        Raises:
            UpstreamError if the circuit is OPEN and the recovery timeout
            hasn't elapsed, or if it is HALF_OPEN and the test call is
            still running.
        """
        if self.state == self.CLOSED:
            return True

        if self.state == self.OPEN:
            elapsed = time.time() - (self.last_failure_time or 0)
            if elapsed >= self.recovery_timeout:
                logger.info(
                    "Circuit breaker transitioning to HALF_OPEN after %.1fs",
                    elapsed,
                )
                self.state = self.HALF_OPEN
                self.trial_in_flight = True
                return True

            raise UpstreamError(
                retry_after=int(self.recovery_timeout - elapsed),
                context={"circuit": self.state},
            )

        if self.trial_in_flight:
            raise UpstreamError(
                retry_after=self.recovery_timeout,
                context={"circuit": self.state},
            )
        self.trial_in_flight = True
        return True

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Circuit breaker transitioning to CLOSED (service recovered)")
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None
        self.trial_in_flight = False

    def release_trial(self) -> None:
        """Give up the HALF_OPEN test slot without recording an outcome."""
        self.trial_in_flight = False

    def record_failure(self) -> None:
        """Record a failed call. May trigger CLOSED → OPEN transition."""
        self.failure_count += 1
        self.last_failure_time = time.time()
        self.trial_in_flight = False

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit breaker returning to OPEN (test request failed)")
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit breaker OPENING after %d consecutive failures",
                self.failure_count,
            )
            self.state = self.OPEN


# ══════════════════════════════════════════════════════════════════════════
# Cloudinary Service
# ══════════════════════════════════════════════════════════════════════════

class CloudinaryMediaService(MediaService):
    """
    Cloudinary implementation of MediaService.

    Error Handling Chain:
        SDK call fails → tenacity retries (retry_max_attempts, backoff)
        → All retries fail → record circuit breaker failure → UpstreamError
        → Threshold reached → later calls rejected instantly
        → Recovery timeout → one test call (HALF_OPEN)
    """

    def __init__(self, settings: Settings):
        self.folder = settings.media_folder
        self.transformation = [
            {"width": settings.media_width, "height": settings.media_height, "crop": "fill"},
            {"quality": "auto"},
        ]
        self.max_attempts = settings.retry_max_attempts
        self.min_wait = settings.retry_min_wait
        self.max_wait = settings.retry_max_wait

        # The SDK keeps credentials in module-level config
        if settings.media_configured:
            cloudinary.config(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                secure=True,
            )
        else:
            logger.warning("Cloudinary credentials are not set; uploads will fail")

        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )

        logger.info(
            "CloudinaryMediaService initialized with folder=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds)",
            self.folder,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    @property
    def circuit_open(self) -> bool:
        return self.circuit_breaker.state == CircuitBreaker.OPEN

    @staticmethod
    def to_data_uri(content: bytes, content_type: str) -> str:
        encoded = base64.b64encode(content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

    async def upload_image(
        self,
        content: bytes,
        content_type: str,
        filename: Optional[str] = None,
    ) -> ImageDescriptor:
        """
        Upload one image to Cloudinary.

        Flow:
            1. Check circuit breaker → may raise UpstreamError
            2. Upload with retry logic
            3. Record success/failure in circuit breaker
        """
        request_id = current_request_id()
        self.circuit_breaker.can_execute()

        logger.info(
            "[%s] Uploading %s (%d bytes) to folder %s",
            request_id,
            filename or "image",
            len(content),
            self.folder,
        )

        try:
            result = await self._upload_with_retry(
                self.to_data_uri(content, content_type), request_id
            )
            self.circuit_breaker.record_success()
        except asyncio.CancelledError:
            self.circuit_breaker.release_trial()
            raise
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] Cloudinary upload failed after %d attempt(s): %s",
                request_id,
                self.max_attempts,
                str(e),
            )
            raise UpstreamError(
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"request_id": request_id, "error_type": type(e).__name__},
            )

        return ImageDescriptor(
            url=result["secure_url"],
            public_id=result["public_id"],
            width=result["width"],
            height=result["height"],
        )

    async def _upload_with_retry(self, data_uri: str, request_id: str) -> Dict[str, Any]:
        """
        Make the SDK call, retried by tenacity.

        The circuit breaker check sits outside this method so only the API
        call itself is retried.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.min_wait,
                max=self.max_wait,
                jitter=1,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                start_time = time.time()
                result = await asyncio.to_thread(
                    cloudinary.uploader.upload,
                    data_uri,
                    folder=self.folder,
                    resource_type="auto",
                    transformation=self.transformation,
                )
                logger.info(
                    "[%s] Cloudinary upload completed in %.0fms: %s",
                    request_id,
                    (time.time() - start_time) * 1000,
                    result.get("public_id"),
                )
        return result

    async def delete_image(self, public_id: str) -> bool:
        """Best-effort delete; failures are logged, never raised."""
        try:
            result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        except Exception as e:
            logger.warning("Failed to delete image %s: %s", public_id, str(e))
            return False

        deleted = result.get("result") == "ok"
        if not deleted:
            logger.warning("Cloudinary did not delete %s: %s", public_id, result)
        return deleted

    async def health_check(self) -> bool:
        """Ping the Admin API (no upload quota used)."""
        try:
            await asyncio.to_thread(cloudinary.api.ping)
            return True
        except Exception as e:
            logger.warning("Cloudinary health check failed: %s", str(e))
            return False
